"""
Value Types
===========
Configuration, session and storage-payload dataclasses.

    - ``FirebaseConfig`` / ``SupabaseConfig`` — validated provider configs
    - ``AuthConfig``                         — the loaded config file
    - ``AuthSession`` / ``FirebaseSession``  — result of ``authenticate()``
    - ``StorageState``                       — what gets written into the browser

Timestamps are absolute epoch milliseconds (the unit browser SDKs use).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Provider configs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FirebaseConfig:
    """Validated Firebase settings."""
    service_account: str
    """Service-account JSON document, as a string."""
    api_key: str
    """Firebase Web API key (public)."""
    uid: str
    """UID of the test principal."""


@dataclass(frozen=True)
class SupabaseConfig:
    """Validated Supabase settings."""
    url: str
    anon_key: str
    email: str
    password: str


@dataclass
class AuthConfig:
    """Loaded configuration file.

    Provider blocks are kept as raw dicts: each provider validates its own
    block, after any profile override has been merged in.
    """
    provider: str
    firebase: Optional[Dict[str, Any]] = None
    supabase: Optional[Dict[str, Any]] = None
    profiles: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    debug: bool = False
    source_path: Optional[str] = None

    def provider_block(self, name: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Return the raw config block of *name* (default: active provider)."""
        return getattr(self, name or self.provider, None)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@dataclass
class AuthSession:
    """A freshly issued session. Never persisted by this library."""
    provider: str
    principal_id: str
    access_token: str
    expires_at: int
    """Absolute expiry, epoch ms. Computed once at issuance."""
    issued_at: int
    """Issuance instant, epoch ms."""
    refresh_token: Optional[str] = None


@dataclass
class ProviderUserInfo:
    """Linked-identity record, in the shape the Firebase web SDK stores."""
    provider_id: str
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    photo_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "providerId": self.provider_id,
            "uid": self.uid,
            "displayName": self.display_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "photoURL": self.photo_url,
        }


@dataclass
class FirebaseSession(AuthSession):
    api_key: str = ""
    email: Optional[str] = None
    email_verified: bool = False
    provider_data: List[ProviderUserInfo] = field(default_factory=list)
    created_at: int = 0


# ---------------------------------------------------------------------------
# Storage payload
# ---------------------------------------------------------------------------

@dataclass
class StorageEntry:
    """A LocalStorage / SessionStorage key-value pair."""
    key: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "value": self.value}


@dataclass
class IndexedDBEntry:
    """A single record to ``put`` into an IndexedDB object store.

    When ``key_path`` is set the store uses in-line keys and the record is
    written as ``{key_path: key, "value": value}``; otherwise ``value`` is
    stored under the out-of-line ``key``.
    """
    database: str
    version: int
    store: str
    key: str
    value: Any
    key_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database,
            "version": self.version,
            "store": self.store,
            "key": self.key,
            "keyPath": self.key_path,
            "value": self.value,
        }


@dataclass
class Cookie:
    """Cookie in the shape ``BrowserContext.add_cookies`` accepts."""
    name: str
    value: str
    url: Optional[str] = None
    domain: Optional[str] = None
    path: Optional[str] = None
    expires: Optional[float] = None
    http_only: bool = False
    secure: bool = False
    same_site: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "value": self.value}
        if self.url:
            data["url"] = self.url
        else:
            data["domain"] = self.domain
            data["path"] = self.path or "/"
        if self.expires is not None:
            data["expires"] = self.expires
        data["httpOnly"] = self.http_only
        data["secure"] = self.secure
        if self.same_site:
            data["sameSite"] = self.same_site
        return data


@dataclass
class StorageState:
    """Provider-agnostic description of what to write into the browser."""
    local_storage: List[StorageEntry] = field(default_factory=list)
    session_storage: List[StorageEntry] = field(default_factory=list)
    indexed_db: List[IndexedDBEntry] = field(default_factory=list)
    cookies: List[Cookie] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Plain JSON-serializable form handed to the in-browser script.

        Cookies are not part of it: they are set on the browser context.
        """
        return {
            "localStorage": [e.to_dict() for e in self.local_storage],
            "sessionStorage": [e.to_dict() for e in self.session_storage],
            "indexedDB": [e.to_dict() for e in self.indexed_db],
        }
