"""
Auth Injection Orchestrator
===========================
``inject_auth(page)`` drives the full pipeline for one page:

    CONFIG_PENDING → CONFIG_LOADED → PROVIDER_SELECTED → AUTHENTICATED
        → INJECTED → NAVIGATED → SETTLED

Any failure moves straight to ``FAILED`` and re-raises, except navigation:
the init script is already registered and will run on the caller's own
next navigation, so a failed ``goto`` (e.g. no ``base_url``) is logged and
the flow continues.

Usage::

    from playwright_auth_injector import inject_auth

    async def test_dashboard(page):
        await inject_auth(page)
        await page.goto("/dashboard")

    # Alternate principal from the config's ``profiles`` block
    await inject_auth(page, profile="admin")
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .config import ConfigStore, _DEFAULTS, apply_profile, get_config_store
from .errors import AuthError
from .injector import StorageInjector
from .models import AuthSession, StorageState
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


class InjectState(enum.Enum):
    CONFIG_PENDING = "config_pending"
    CONFIG_LOADED = "config_loaded"
    PROVIDER_SELECTED = "provider_selected"
    AUTHENTICATED = "authenticated"
    INJECTED = "injected"
    NAVIGATED = "navigated"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass
class InjectResult:
    """Outcome of one ``inject_auth`` call."""
    state: InjectState = InjectState.CONFIG_PENDING
    provider: Optional[str] = None
    profile: Optional[str] = None
    session: Optional[AuthSession] = None
    storage_state: Optional[StorageState] = None
    navigation_error: Optional[str] = None
    error_code: Optional[str] = None
    history: List[InjectState] = field(default_factory=list)

    def advance(self, state: InjectState) -> None:
        self.history.append(state)
        self.state = state


async def inject_auth(
    page: Any,
    profile: Optional[str] = None,
    wait_after: Optional[int] = None,
    *,
    store: Optional[ConfigStore] = None,
    config_path: Optional[str] = None,
    injector: Optional[StorageInjector] = None,
) -> InjectResult:
    """Authenticate and write the session into *page*'s browser storage.

    Args:
        page:        A Playwright ``Page``.
        profile:     Name of a ``profiles`` entry to apply.
        wait_after:  Settle delay in ms after navigation (default 2000).
        store:       Config store (default: the process-wide one).
        config_path: Explicit config file, skipping discovery.
        injector:    Storage injector (default: ``StorageInjector()``).

    Returns:
        An ``InjectResult`` in state ``SETTLED``.

    Raises:
        AuthError: one of the taxonomy kinds; nothing is retried.
        UnknownProviderError: provider name not registered.

        Either error carries the ``FAILED`` result as ``exc.result``.
    """
    result = InjectResult(profile=profile)
    result.advance(InjectState.CONFIG_PENDING)
    store = store or get_config_store()
    injector = injector or StorageInjector()
    wait_after = _DEFAULTS["wait_after_ms"] if wait_after is None else wait_after

    try:
        config = store.load(path=config_path)
        result.advance(InjectState.CONFIG_LOADED)
        log = logger.info if config.debug else logger.debug

        config = apply_profile(config, profile)
        provider = ProviderRegistry.get(config.provider)
        provider_config = provider.validate_config(config.provider_block())
        result.provider = provider.name
        result.advance(InjectState.PROVIDER_SELECTED)
        log(f"[INJECT] Starting {provider.name} authentication"
            + (f" (profile: {profile})" if profile else ""))

        session = await provider.authenticate(provider_config)
        result.session = session
        result.advance(InjectState.AUTHENTICATED)
        log(f"[INJECT] Authenticated as {session.principal_id}")

        state = provider.to_storage_state(session, provider_config)
        result.storage_state = state
        await injector.register(page, state)
        result.advance(InjectState.INJECTED)
        log("[INJECT] Storage injection script registered")
    except (AuthError, LookupError) as exc:
        result.error_code = getattr(exc, "code", None) or type(exc).__name__
        result.advance(InjectState.FAILED)
        logger.error(f"[INJECT] Failed at {result.history[-2].value}: {exc}")
        exc.result = result
        raise

    try:
        await page.goto(_DEFAULTS["navigate_url"], wait_until="networkidle")
        log("[INJECT] Page navigation complete")
    except Exception as exc:
        result.navigation_error = str(exc)
        log(f"[INJECT] Page navigation skipped: {exc}")
    result.advance(InjectState.NAVIGATED)

    await page.wait_for_timeout(wait_after)
    result.advance(InjectState.SETTLED)
    log(f"[INJECT] {result.provider} authentication complete")
    return result
