"""
Firebase Auth Provider
======================
Concrete implementation of ``BaseAuthProvider`` for Firebase Authentication.

Pipeline (strictly sequential, first failure short-circuits):
    1. Initialize the Admin SDK from the service-account JSON (once per process)
    2. Mint a custom token for the configured UID
    3. Exchange it at the Identity Toolkit REST endpoint for an ID token
    4. Fetch the user record (email, verification flag, linked identities)
    5. Shape everything into the IndexedDB record the Firebase web SDK reads

The web SDK (v9+, ``browserLocalPersistence``) keeps the signed-in user in
IndexedDB database ``firebaseLocalStorageDb`` / store ``firebaseLocalStorage``
under the key ``firebase:authUser:<apiKey>:[DEFAULT]``. That naming is the
SDK's internal contract; if it drifts the app silently sees no user.

The Admin SDK and ``requests`` are blocking, so each call runs in the event
loop's default executor.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional

import firebase_admin
import requests
from firebase_admin import auth, credentials

from ..errors import AuthenticationError, TokenExchangeError
from ..models import (
    FirebaseConfig,
    FirebaseSession,
    IndexedDBEntry,
    ProviderUserInfo,
    StorageState,
)
from .base import BaseAuthProvider, optional_str

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Firebase constants
# ---------------------------------------------------------------------------

TOKEN_EXCHANGE_URL = (
    "https://identitytoolkit.googleapis.com/v1/accounts:signInWithCustomToken"
)
TOKEN_EXCHANGE_TIMEOUT = 30  # seconds

KEY_NAMESPACE = "firebase"
APP_NAME = "[DEFAULT]"
INDEXED_DB_NAME = "firebaseLocalStorageDb"
INDEXED_DB_VERSION = 1
INDEXED_DB_STORE = "firebaseLocalStorage"
INDEXED_DB_KEY_PATH = "fbase_key"

# Name of the Admin SDK app this library owns. Kept separate from the
# host's default app so a test suite that also uses firebase_admin is not
# affected.
ADMIN_APP_NAME = "playwright-auth-injector"


def storage_key(api_key: str) -> str:
    """``firebase:authUser:<apiKey>:[DEFAULT]``"""
    return f"{KEY_NAMESPACE}:authUser:{api_key}:{APP_NAME}"


def _now_ms() -> int:
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Process-wide Admin SDK state
# ---------------------------------------------------------------------------

class AdminState:
    """Process-scoped Admin SDK app, initialized at most once.

    ``ensure_initialized`` is idempotent: a second caller (including one
    racing the first) finds the app already present and reuses it.
    ``reset`` drops the reference and deletes the app, for test isolation.
    """

    def __init__(self) -> None:
        self.app: Optional[firebase_admin.App] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self.app is not None

    def ensure_initialized(self, service_account_json: str) -> firebase_admin.App:
        if self.app is not None:
            return self.app
        with self._lock:
            if self.app is not None:
                return self.app
            try:
                info = json.loads(service_account_json)
                cred = credentials.Certificate(info)
            except (ValueError, TypeError) as exc:
                raise AuthenticationError(
                    f"Failed to initialize Firebase Admin SDK: {exc}", exc
                ) from exc

            try:
                app = firebase_admin.initialize_app(cred, name=ADMIN_APP_NAME)
            except ValueError as exc:
                # Already initialized by a concurrent caller.
                try:
                    app = firebase_admin.get_app(ADMIN_APP_NAME)
                except ValueError:
                    raise AuthenticationError(
                        f"Failed to initialize Firebase Admin SDK: {exc}", exc
                    ) from exc
            self.app = app
            logger.debug("[FIREBASE] Admin SDK initialized")
            return app

    def reset(self) -> None:
        with self._lock:
            if self.app is not None:
                try:
                    firebase_admin.delete_app(self.app)
                except ValueError:
                    pass
            self.app = None


_ADMIN_STATE = AdminState()


def reset_admin_state() -> None:
    """Forget the initialized Admin SDK app (for tests)."""
    _ADMIN_STATE.reset()


# ---------------------------------------------------------------------------
# Token exchange result
# ---------------------------------------------------------------------------

@dataclass
class TokenExchangeResult:
    id_token: str
    refresh_token: str
    expires_in: int
    """Token lifetime in seconds."""


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class FirebaseAuthProvider(BaseAuthProvider):
    """Custom-token sign-in against Firebase Authentication."""

    REQUIRED_FIELDS = ("serviceAccount", "apiKey", "uid")

    def __init__(self, admin_state: Optional[AdminState] = None):
        self._admin_state = admin_state

    @property
    def name(self) -> str:
        return "firebase"

    @property
    def admin_state(self) -> AdminState:
        return self._admin_state or _ADMIN_STATE

    # ── Config ────────────────────────────────────────────────────

    def validate_config(self, raw: Any) -> FirebaseConfig:
        block = self._require_block(raw)
        values = self._require_strings(block, self.REQUIRED_FIELDS)
        return FirebaseConfig(
            service_account=values["serviceAccount"],
            api_key=values["apiKey"],
            uid=values["uid"],
        )

    # ── Sign-in pipeline ──────────────────────────────────────────

    async def authenticate(self, config: FirebaseConfig) -> FirebaseSession:
        app = self.admin_state.ensure_initialized(config.service_account)

        custom_token = await self._create_custom_token(app, config.uid)
        logger.debug(f"[FIREBASE] Custom token created for UID {config.uid}")

        tokens = await self._exchange_custom_token(custom_token, config.api_key)
        logger.debug("[FIREBASE] Token exchange complete")

        user = await self._get_user_record(app, config.uid)
        logger.debug("[FIREBASE] User record retrieved")

        return self._build_session(config, tokens, user)

    async def _create_custom_token(self, app: firebase_admin.App, uid: str) -> str:
        loop = asyncio.get_event_loop()
        try:
            token = await loop.run_in_executor(
                None, lambda: auth.create_custom_token(uid, app=app)
            )
        except Exception as exc:
            raise AuthenticationError(
                f"Failed to create custom token (UID: {uid}): {exc}", exc
            ) from exc
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return token

    async def _exchange_custom_token(
        self, custom_token: str, api_key: str
    ) -> TokenExchangeResult:
        loop = asyncio.get_event_loop()

        def _sync_post() -> requests.Response:
            return requests.post(
                TOKEN_EXCHANGE_URL,
                params={"key": api_key},
                json={"token": custom_token, "returnSecureToken": True},
                timeout=TOKEN_EXCHANGE_TIMEOUT,
            )

        try:
            response = await loop.run_in_executor(None, _sync_post)
        except requests.RequestException as exc:
            raise TokenExchangeError(
                f"Token exchange request failed: {exc}", cause=exc
            ) from exc

        # requests' ``ok`` accepts 3xx; only 2xx carries tokens
        if not 200 <= response.status_code < 300:
            raise TokenExchangeError(
                f"Firebase REST API error: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            return TokenExchangeResult(
                id_token=data["idToken"],
                refresh_token=data["refreshToken"],
                expires_in=int(data["expiresIn"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise TokenExchangeError(
                f"Malformed token exchange response: {exc}", cause=exc
            ) from exc

    async def _get_user_record(self, app: firebase_admin.App, uid: str) -> Any:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(
                None, lambda: auth.get_user(uid, app=app)
            )
        except Exception as exc:
            raise AuthenticationError(
                f"Failed to get user info (UID: {uid}): {exc}", exc
            ) from exc

    def _build_session(
        self, config: FirebaseConfig, tokens: TokenExchangeResult, user: Any
    ) -> FirebaseSession:
        now = _now_ms()

        metadata = getattr(user, "user_metadata", None)
        creation = getattr(metadata, "creation_timestamp", None)

        provider_data = [
            ProviderUserInfo(
                provider_id=getattr(info, "provider_id", "") or "",
                uid=getattr(info, "uid", "") or "",
                display_name=optional_str(getattr(info, "display_name", None)),
                email=optional_str(getattr(info, "email", None)),
                phone_number=optional_str(getattr(info, "phone_number", None)),
                photo_url=optional_str(getattr(info, "photo_url", None)),
            )
            for info in (getattr(user, "provider_data", None) or [])
        ]

        return FirebaseSession(
            provider=self.name,
            principal_id=config.uid,
            access_token=tokens.id_token,
            refresh_token=tokens.refresh_token,
            issued_at=now,
            expires_at=now + tokens.expires_in * 1000,
            api_key=config.api_key,
            email=optional_str(getattr(user, "email", None)),
            email_verified=bool(getattr(user, "email_verified", False)),
            provider_data=provider_data,
            created_at=int(creation) if creation else now,
        )

    # ── Payload shaping ───────────────────────────────────────────

    def to_storage_state(
        self, session: FirebaseSession, config: FirebaseConfig
    ) -> StorageState:
        key = storage_key(config.api_key)
        user = {
            "uid": session.principal_id,
            "email": session.email,
            "emailVerified": session.email_verified,
            "isAnonymous": False,
            "providerData": [p.to_dict() for p in session.provider_data],
            "stsTokenManager": {
                "accessToken": session.access_token,
                "refreshToken": session.refresh_token,
                "expirationTime": session.expires_at,
            },
            "createdAt": str(session.created_at),
            "lastLoginAt": str(session.issued_at),
            "apiKey": config.api_key,
            "appName": APP_NAME,
        }
        return StorageState(
            indexed_db=[
                IndexedDBEntry(
                    database=INDEXED_DB_NAME,
                    version=INDEXED_DB_VERSION,
                    store=INDEXED_DB_STORE,
                    key=key,
                    value=user,
                    key_path=INDEXED_DB_KEY_PATH,
                )
            ]
        )
