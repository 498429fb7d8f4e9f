"""
Supabase Auth Provider
======================
Config validation for Supabase password sign-in.

Sign-in itself is not implemented yet: ``authenticate`` raises a
``ConfigInvalidError`` on ``provider`` before any network call, so a
config that selects Supabase fails fast at the ``inject_auth`` call site.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import ConfigInvalidError
from ..models import AuthSession, StorageState, SupabaseConfig
from .base import BaseAuthProvider

logger = logging.getLogger(__name__)

_NOT_IMPLEMENTED = "Supabase is not yet implemented. Please use Firebase."


class SupabaseAuthProvider(BaseAuthProvider):
    """Email/password provider, storage backend LocalStorage (planned)."""

    REQUIRED_FIELDS = ("url", "anonKey", "email", "password")

    @property
    def name(self) -> str:
        return "supabase"

    def validate_config(self, raw: Any) -> SupabaseConfig:
        block = self._require_block(raw)
        values = self._require_strings(block, self.REQUIRED_FIELDS)
        return SupabaseConfig(
            url=values["url"],
            anon_key=values["anonKey"],
            email=values["email"],
            password=values["password"],
        )

    async def authenticate(self, config: SupabaseConfig) -> AuthSession:
        logger.debug("[SUPABASE] Sign-in requested but not implemented")
        raise ConfigInvalidError(_NOT_IMPLEMENTED, "provider")

    def to_storage_state(self, session: AuthSession, config: SupabaseConfig) -> StorageState:
        raise ConfigInvalidError(_NOT_IMPLEMENTED, "provider")
