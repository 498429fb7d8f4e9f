"""
Base Auth Provider (Abstract)
=============================
Defines the contract that ALL identity-provider strategies must implement.

To add a new provider (e.g. Auth0):
    1. Create ``auth0.py`` inheriting from ``BaseAuthProvider``
    2. Implement the three capabilities below
    3. Register it in ``registry.py`` (``_auto_register``)
    4. No changes to the orchestrator are needed.

Design principles:
    - The orchestrator never imports provider-specific code directly
    - Providers never touch the page: they only produce a ``StorageState``
    - ``authenticate`` is NOT idempotent (custom tokens are single-use);
      callers must not replay it, a retry means a fresh call
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import ConfigInvalidError
from ..models import AuthSession, StorageState

logger = logging.getLogger(__name__)


class BaseAuthProvider(ABC):
    """Abstract base for all identity-provider strategies.

    Subclasses MUST implement:
        - ``name``                       — registry tag (e.g. "firebase")
        - ``validate_config(raw)``       — raw dict → typed config
        - ``authenticate(config)``       — network sign-in → ``AuthSession``
        - ``to_storage_state(session, config)`` — pure payload shaping
    """

    # ── Identity ──────────────────────────────────────────────────

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider tag used in the config file's ``provider`` field."""
        ...

    # ── Capabilities ──────────────────────────────────────────────

    @abstractmethod
    def validate_config(self, raw: Any) -> Any:
        """Validate the provider's raw config block.

        Returns a fully populated typed config, or raises
        ``ConfigInvalidError`` naming the dotted field path. Never returns a
        partially valid object.
        """
        ...

    @abstractmethod
    async def authenticate(self, config: Any) -> AuthSession:
        """Sign in as the configured principal.

        Raises:
            AuthenticationError: local credential / admin SDK failure.
            TokenExchangeError:  remote exchange failed.
        """
        ...

    @abstractmethod
    def to_storage_state(self, session: AuthSession, config: Any) -> StorageState:
        """Shape *session* into the browser storage the client SDK expects.

        Must be pure: no I/O, timestamps come from *session*.
        """
        ...

    # ── Shared validation helpers ─────────────────────────────────

    def _require_block(self, raw: Any) -> Mapping[str, Any]:
        if not isinstance(raw, Mapping):
            raise ConfigInvalidError(f"{self.name} config is required", self.name)
        return raw

    def _require_strings(
        self, raw: Mapping[str, Any], fields: Tuple[str, ...]
    ) -> Dict[str, str]:
        """Check every field in *fields* is a non-empty string.

        All fields are checked before anything is returned, so the caller
        never sees a partial result.
        """
        values: Dict[str, str] = {}
        for key in fields:
            value = raw.get(key)
            if not value or not isinstance(value, str):
                raise ConfigInvalidError(
                    f"{key} must be a non-empty string", f"{self.name}.{key}"
                )
            values[key] = value
        return values

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


def optional_str(value: Any) -> Optional[str]:
    """Empty / missing profile strings become ``None``."""
    return value if isinstance(value, str) and value else None
