"""
Configuration Store
===================
Discovers, loads, validates and caches the injector configuration file.

Discovery tries ``CONFIG_FILE_NAMES`` in the working directory, in order;
the first existing file wins. Supported formats:

    - ``*.py``   — the module exposes the config mapping as ``config``
                   (or ``default``), usually built with ``define_config``
    - ``*.json`` — the document root is the config mapping

Example ``playwright_auth_config.py``::

    import os
    from playwright_auth_injector import define_config

    config = define_config({
        "provider": "firebase",
        "firebase": {
            "serviceAccount": os.environ["FIREBASE_SERVICE_ACCOUNT"],
            "apiKey": os.environ["FIREBASE_API_KEY"],
            "uid": os.environ["TEST_USER_UID"],
        },
        "profiles": {"admin": {"uid": os.environ["ADMIN_UID"]}},
    })

The loaded config is cached by a ``ConfigStore``; ``invalidate()`` drops it.
"""

from __future__ import annotations

import importlib.util
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConfigInvalidError, ConfigNotFoundError
from .models import AuthConfig
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "config_file_names": [
        "playwright_auth_config.py",
        "playwright-auth.config.py",
        "playwright-auth.config.json",
    ],
    "wait_after_ms": 2000,          # settle delay after navigation
    "navigate_url": "/",            # resolved against the context's base_url
    "output_dir": ".auth",
    "storage_state_file": "user.json",
    "base_url": "http://localhost:3000",
}

CONFIG_FILE_NAMES: List[str] = list(_DEFAULTS["config_file_names"])


def define_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Identity helper for config files; returns *config* unchanged."""
    return config


# ---------------------------------------------------------------------------
# Discovery + parsing
# ---------------------------------------------------------------------------

def candidate_paths(cwd: Optional[str] = None) -> List[str]:
    """Absolute candidate config paths, in search order."""
    base = Path(cwd or os.getcwd()).resolve()
    return [str(base / name) for name in CONFIG_FILE_NAMES]


def find_config_path(cwd: Optional[str] = None) -> Optional[str]:
    for path in candidate_paths(cwd):
        if Path(path).is_file():
            return path
    return None


def _read_config_file(path: str) -> Any:
    """Import / parse the file at *path* and return its raw config object."""
    if path.endswith(".json"):
        return json.loads(Path(path).read_text(encoding="utf-8"))

    spec = importlib.util.spec_from_file_location("_playwright_auth_config", path)
    if spec is None or spec.loader is None:
        raise ConfigInvalidError(f"Cannot import config file: {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for attr in ("config", "default"):
        if hasattr(module, attr):
            return getattr(module, attr)
    raise ConfigInvalidError(
        f"Config file {path} must define a 'config' (or 'default') mapping"
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_config(raw: Any, source_path: Optional[str] = None) -> AuthConfig:
    """Check the top-level shape and the selected provider's block.

    Raises:
        ConfigInvalidError: naming the dotted path of the first bad field.
    """
    if not isinstance(raw, Mapping):
        raise ConfigInvalidError("Config must be a mapping")

    provider = raw.get("provider")
    if not provider:
        raise ConfigInvalidError("provider is required", "provider")
    if not isinstance(provider, str) or not ProviderRegistry.is_registered(provider):
        known = "', '".join(ProviderRegistry.list_providers())
        raise ConfigInvalidError(
            f"provider must be one of '{known}'. Got: {provider}", "provider"
        )
    provider = provider.lower()

    blocks: Dict[str, Optional[Dict[str, Any]]] = {}
    for name in ("firebase", "supabase"):
        block = raw.get(name)
        if block is not None and not isinstance(block, Mapping):
            raise ConfigInvalidError(f"{name} config must be a mapping", name)
        blocks[name] = dict(block) if block is not None else None

    # Selected provider's block must be complete on its own.
    ProviderRegistry.get(provider).validate_config(blocks.get(provider))

    profiles = raw.get("profiles") or {}
    if not isinstance(profiles, Mapping):
        raise ConfigInvalidError("profiles must be a mapping", "profiles")
    for name, override in profiles.items():
        if not isinstance(override, Mapping):
            raise ConfigInvalidError(
                "profile override must be a mapping", f"profiles.{name}"
            )

    debug = raw.get("debug", False)
    if not isinstance(debug, bool):
        raise ConfigInvalidError("debug must be a boolean", "debug")

    return AuthConfig(
        provider=provider,
        firebase=blocks["firebase"],
        supabase=blocks["supabase"],
        profiles={str(k): dict(v) for k, v in profiles.items()},
        debug=debug,
        source_path=source_path,
    )


def apply_profile(config: AuthConfig, profile: Optional[str]) -> AuthConfig:
    """Return a copy of *config* with profile *profile* merged in.

    The override is shallow and lands only in the active provider's block;
    every other block is returned untouched.
    """
    if not profile:
        return config
    if profile not in config.profiles:
        raise ConfigInvalidError(
            f"Unknown profile '{profile}'", f"profiles.{profile}"
        )

    override = config.profiles[profile]
    merged = dict(config.provider_block() or {})
    merged.update(override)
    logger.debug(
        f"[CONFIG] Profile '{profile}' overrides "
        f"{', '.join(sorted(override)) or 'nothing'} on {config.provider}"
    )

    return AuthConfig(
        provider=config.provider,
        firebase=merged if config.provider == "firebase" else config.firebase,
        supabase=merged if config.provider == "supabase" else config.supabase,
        profiles=config.profiles,
        debug=config.debug,
        source_path=config.source_path,
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ConfigStore:
    """Holds the loaded config for the process.

    ``load`` parses at most once until ``invalidate`` is called. Two
    concurrent first loads may both parse; they produce equal values and the
    last one wins.
    """

    def __init__(self) -> None:
        self._cached: Optional[AuthConfig] = None

    @property
    def cached(self) -> Optional[AuthConfig]:
        return self._cached

    def load(self, cwd: Optional[str] = None, path: Optional[str] = None) -> AuthConfig:
        """Return the cached config, loading it first if needed.

        Args:
            cwd:  Directory to search (default: current working directory).
            path: Explicit config file; skips discovery.

        Raises:
            ConfigNotFoundError: no file found.
            ConfigInvalidError:  file unreadable or malformed.
        """
        if path:
            resolved = str(Path(path).resolve())
            if self._cached is not None and self._cached.source_path == resolved:
                return self._cached
            if not Path(resolved).is_file():
                raise ConfigNotFoundError([resolved])
        else:
            if self._cached is not None:
                return self._cached
            resolved = find_config_path(cwd)
            if resolved is None:
                raise ConfigNotFoundError(candidate_paths(cwd))

        try:
            raw = _read_config_file(resolved)
        except ConfigInvalidError:
            raise
        except Exception as exc:
            raise ConfigInvalidError(
                f"Failed to load config file: {exc}", cause=exc
            ) from exc

        config = validate_config(raw, source_path=resolved)
        self._cached = config
        logger.debug(f"[CONFIG] Loaded {resolved} (provider: {config.provider})")
        return config

    def invalidate(self) -> None:
        self._cached = None


_DEFAULT_STORE = ConfigStore()


def get_config_store() -> ConfigStore:
    return _DEFAULT_STORE


def load_config(cwd: Optional[str] = None, path: Optional[str] = None) -> AuthConfig:
    """Load the config through the process-wide store."""
    return _DEFAULT_STORE.load(cwd=cwd, path=path)


def clear_config_cache() -> None:
    """Drop the process-wide cached config (for tests)."""
    _DEFAULT_STORE.invalidate()
