"""
Storage Injector
================
Writes a ``StorageState`` into the browser before any page script runs.

The in-browser logic is a fixed script (``INIT_SCRIPT``, versioned by
``INIT_SCRIPT_VERSION``); only the JSON payload embedded at its call site
changes per injection. Playwright for Python's ``add_init_script`` takes
script text only, so the payload is serialized into that text.

The script is registered, not awaited: IndexedDB writes complete
asynchronously inside the page. ``inject_auth`` covers that with a settle
delay after navigation.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .errors import InjectionError
from .models import StorageState

logger = logging.getLogger(__name__)


INIT_SCRIPT_VERSION = "1"

# In-browser failures are reported on the console and never thrown: a
# broken write must not break the page under test.
INIT_SCRIPT = r"""
(function (payload) {
  function writeEntries(storage, entries, label) {
    (entries || []).forEach(function (entry) {
      try {
        storage.setItem(entry.key, entry.value);
      } catch (err) {
        console.error('[playwright-auth-injector] ' + label + ' write failed:', err);
      }
    });
  }

  try { writeEntries(window.localStorage, payload.localStorage, 'localStorage'); } catch (err) {}
  try { writeEntries(window.sessionStorage, payload.sessionStorage, 'sessionStorage'); } catch (err) {}

  (payload.indexedDB || []).forEach(function (entry) {
    var request;
    try {
      request = indexedDB.open(entry.database, entry.version);
    } catch (err) {
      console.error('[playwright-auth-injector] IndexedDB open failed:', err);
      return;
    }

    request.onupgradeneeded = function (event) {
      var db = event.target.result;
      if (!db.objectStoreNames.contains(entry.store)) {
        if (entry.keyPath) {
          db.createObjectStore(entry.store, { keyPath: entry.keyPath });
        } else {
          db.createObjectStore(entry.store);
        }
      }
    };

    request.onsuccess = function (event) {
      var db = event.target.result;
      try {
        var tx = db.transaction([entry.store], 'readwrite');
        var store = tx.objectStore(entry.store);
        if (store.keyPath) {
          var record = { value: entry.value };
          record[store.keyPath] = entry.key;
          store.put(record);
        } else {
          store.put(entry.value, entry.key);
        }
        tx.oncomplete = function () { db.close(); };
      } catch (err) {
        console.error('[playwright-auth-injector] IndexedDB write failed:', err);
        db.close();
      }
    };

    request.onerror = function (event) {
      console.error('[playwright-auth-injector] IndexedDB open error:', event.target.error);
    };
  });
})
"""


class StorageInjector:
    """Registers storage writes on a Playwright page."""

    def build_script(self, state: StorageState) -> str:
        """Return the init script with *state*'s payload embedded."""
        payload = json.dumps(state.to_payload(), separators=(",", ":"))
        return (
            f"/* playwright-auth-injector init script v{INIT_SCRIPT_VERSION} */\n"
            f"{INIT_SCRIPT.strip()}({payload});\n"
        )

    async def register(self, page: Any, state: StorageState) -> None:
        """Add cookies to the page's context and register the init script.

        Raises:
            InjectionError: the page rejected the cookies or the script.
        """
        if state.cookies:
            try:
                await page.context.add_cookies([c.to_dict() for c in state.cookies])
            except Exception as exc:
                raise InjectionError(f"Failed to add cookies: {exc}", exc) from exc
            logger.debug(f"[INJECT] Added {len(state.cookies)} cookie(s)")

        script = self.build_script(state)
        try:
            await page.add_init_script(script=script)
        except Exception as exc:
            raise InjectionError(
                f"Failed to add storage injection script: {exc}", exc
            ) from exc

        logger.debug(
            f"[INJECT] Init script registered "
            f"({len(state.indexed_db)} IndexedDB, "
            f"{len(state.local_storage)} localStorage, "
            f"{len(state.session_storage)} sessionStorage entries)"
        )
