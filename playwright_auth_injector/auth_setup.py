"""
Auth Setup Utility
==================
Produces a reusable Playwright ``storage_state`` file without a login UI.

Workflow:
    1. Launch headless Chromium
    2. Create a context bound to ``base_url``
    3. Run ``inject_auth`` (custom token → storage injection → settle)
    4. Save ``storage_state`` (cookies + localStorage + IndexedDB)
    5. Close browser

The saved file can then be loaded by test contexts via
``browser.new_context(storage_state=".auth/user.json")``.

Usage::

    # From command line:
    python -m playwright_auth_injector setup --base-url http://localhost:3000

    # Programmatic (e.g. from a session-scoped pytest fixture):
    from playwright_auth_injector.auth_setup import auth_setup
    path = asyncio.run(auth_setup(base_url="http://localhost:3000"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright

from .config import _DEFAULTS, ConfigStore
from .inject import inject_auth

logger = logging.getLogger(__name__)


async def auth_setup(
    config_path: Optional[str] = None,
    output_dir: str = _DEFAULTS["output_dir"],
    base_url: str = _DEFAULTS["base_url"],
    storage_state_file: str = _DEFAULTS["storage_state_file"],
    profile: Optional[str] = None,
    headless: bool = True,
    wait_after: Optional[int] = None,
    store: Optional[ConfigStore] = None,
) -> str:
    """Inject auth into a fresh browser and snapshot its storage.

    Args:
        config_path:        Explicit config file (default: discovery in CWD).
        output_dir:         Directory for the storage-state file.
        base_url:           Application URL the context navigates against.
        storage_state_file: File name inside *output_dir*.
        profile:            Optional profile override name.
        headless:           Launch Chromium headless.
        wait_after:         Settle delay in ms.
        store:              Config store (default: process-wide).

    Returns:
        The path of the written storage-state file.
    """
    state_path = Path(output_dir) / storage_state_file
    state_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"[SETUP] Base URL:    {base_url}")
    logger.info(f"[SETUP] Output file: {state_path}")

    pw = await async_playwright().start()
    browser = None
    context = None

    try:
        browser = await pw.chromium.launch(headless=headless)
        context = await browser.new_context(base_url=base_url)
        page = await context.new_page()

        await inject_auth(
            page,
            profile=profile,
            wait_after=wait_after,
            store=store,
            config_path=config_path,
        )

        await context.storage_state(path=str(state_path), indexed_db=True)

        data = json.loads(state_path.read_text(encoding="utf-8"))
        logger.info(
            f"[SETUP] Session saved: {len(data.get('cookies', []))} cookies, "
            f"{len(data.get('origins', []))} origins"
        )
        return str(state_path)

    finally:
        if context:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"[SETUP] Context close error: {e}")
        if browser:
            try:
                await browser.close()
            except Exception as e:
                logger.debug(f"[SETUP] Browser close error: {e}")
        await pw.stop()
