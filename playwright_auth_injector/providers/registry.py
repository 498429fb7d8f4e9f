"""
Provider Registry
=================
Maps provider names (the config file's ``provider`` field) to strategies.

Adding a provider:
    1. Create a class inheriting from ``BaseAuthProvider``
    2. Call ``ProviderRegistry.register(provider_class)``
    3. ``inject_auth`` selects it by name

The registry is the ONLY entry point the orchestrator uses to reach a
provider. Looking up an unregistered name raises ``UnknownProviderError``.

Usage::

    from playwright_auth_injector.providers.registry import ProviderRegistry

    provider = ProviderRegistry.get("firebase")
    config = provider.validate_config(raw_block)
"""

from __future__ import annotations

import logging
from typing import Dict, List, Type

from ..errors import UnknownProviderError
from .base import BaseAuthProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Registry
# ---------------------------------------------------------------------------

# Global registry: maps provider name → strategy instance
_PROVIDER_REGISTRY: Dict[str, BaseAuthProvider] = {}


class ProviderRegistry:
    """Static name → provider lookup.

    Providers are stateless, so one instance per name is shared.
    """

    @staticmethod
    def register(provider_class: Type[BaseAuthProvider]) -> BaseAuthProvider:
        """Instantiate *provider_class* and register it under its name."""
        instance = provider_class()
        name = instance.name.lower()
        _PROVIDER_REGISTRY[name] = instance
        logger.debug(f"[REGISTRY] Registered provider: {name}")
        return instance

    @staticmethod
    def get(name: str) -> BaseAuthProvider:
        """Return the provider registered under *name*.

        Raises:
            UnknownProviderError: no provider with that name.
        """
        key = name.lower() if isinstance(name, str) else name
        provider = _PROVIDER_REGISTRY.get(key)
        if provider is None:
            raise UnknownProviderError(str(name), list(_PROVIDER_REGISTRY))
        return provider

    @staticmethod
    def list_providers() -> List[str]:
        """Return names of all registered providers."""
        return list(_PROVIDER_REGISTRY.keys())

    @staticmethod
    def is_registered(name: str) -> bool:
        return isinstance(name, str) and name.lower() in _PROVIDER_REGISTRY

    @staticmethod
    def reset() -> None:
        """Restore the built-in providers only (test isolation)."""
        _PROVIDER_REGISTRY.clear()
        _auto_register()


def get_provider(name: str) -> BaseAuthProvider:
    """Shortcut for ``ProviderRegistry.get``."""
    return ProviderRegistry.get(name)


# ---------------------------------------------------------------------------
# Auto-register built-in providers on import
# ---------------------------------------------------------------------------

def _auto_register() -> None:
    """Register every built-in provider. Called once at module load time."""
    from .firebase import FirebaseAuthProvider
    from .supabase import SupabaseAuthProvider

    ProviderRegistry.register(FirebaseAuthProvider)
    ProviderRegistry.register(SupabaseAuthProvider)


_auto_register()
