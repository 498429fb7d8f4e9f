"""
Playwright Auth Injector
========================
Start Playwright end-to-end tests already signed in, without a login UI.

A server-side credential mints a session out-of-band (Firebase custom
token → ID token), and the session is written straight into the browser's
storage before any page script runs.

Usage::

    from playwright_auth_injector import inject_auth

    async def test_home(page):
        await inject_auth(page)                    # default principal
        await inject_auth(page, profile="admin")   # profile override

CLI::

    python -m playwright_auth_injector setup --base-url http://localhost:3000
"""

from .errors import (
    AuthError,
    ConfigNotFoundError,
    ConfigInvalidError,
    AuthenticationError,
    TokenExchangeError,
    InjectionError,
    UnknownProviderError,
)
from .models import (
    AuthConfig,
    AuthSession,
    FirebaseConfig,
    FirebaseSession,
    SupabaseConfig,
    StorageState,
    IndexedDBEntry,
    StorageEntry,
    Cookie,
)
from .config import ConfigStore, define_config, load_config, clear_config_cache
from .providers import BaseAuthProvider, ProviderRegistry, get_provider, reset_admin_state
from .injector import StorageInjector
from .inject import inject_auth, InjectResult, InjectState

__all__ = [
    # Entry points
    "inject_auth",
    "define_config",
    "load_config",
    "clear_config_cache",
    "ConfigStore",
    "InjectResult",
    "InjectState",
    # Providers
    "BaseAuthProvider",
    "ProviderRegistry",
    "get_provider",
    "reset_admin_state",
    "StorageInjector",
    # Value types
    "AuthConfig",
    "AuthSession",
    "FirebaseConfig",
    "FirebaseSession",
    "SupabaseConfig",
    "StorageState",
    "IndexedDBEntry",
    "StorageEntry",
    "Cookie",
    # Errors
    "AuthError",
    "ConfigNotFoundError",
    "ConfigInvalidError",
    "AuthenticationError",
    "TokenExchangeError",
    "InjectionError",
    "UnknownProviderError",
]

__version__ = '0.1.0'
