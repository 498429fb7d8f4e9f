"""
Error Taxonomy
==============
Closed set of failure kinds raised by the injection pipeline.

Every step of ``inject_auth`` either succeeds or raises exactly one of:

    - ``ConfigNotFoundError``  — no config file at any candidate path
    - ``ConfigInvalidError``   — config present but malformed (dotted field)
    - ``AuthenticationError``  — local SDK / admin-side failure
    - ``TokenExchangeError``   — remote token exchange failed (HTTP status)
    - ``InjectionError``       — init-script registration failed

``UnknownProviderError`` is deliberately NOT an ``AuthError``: it signals a
provider-name mismatch in the caller's configuration, not an auth problem.
"""

from __future__ import annotations

from typing import List, Optional


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
CONFIG_INVALID = "CONFIG_INVALID"
AUTH_FAILED = "AUTH_FAILED"
TOKEN_EXCHANGE_FAILED = "TOKEN_EXCHANGE_FAILED"
INJECTION_FAILED = "INJECTION_FAILED"

ERROR_CODES = (
    CONFIG_NOT_FOUND,
    CONFIG_INVALID,
    AUTH_FAILED,
    TOKEN_EXCHANGE_FAILED,
    INJECTION_FAILED,
)


class AuthError(Exception):
    """Base class for all pipeline failures.

    Attributes:
        code:  One of ``ERROR_CODES``.
        cause: The underlying exception, if any.
    """

    code: str = ""

    def __init__(
        self, message: str, code: str = "", cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.cause = cause


class ConfigNotFoundError(AuthError):
    """No configuration file exists at any of the searched paths."""

    code = CONFIG_NOT_FOUND

    def __init__(self, search_paths: List[str]):
        self.search_paths = list(search_paths)
        listing = "\n".join(f"  - {p}" for p in self.search_paths)
        super().__init__(
            f"Config file not found. Searched the following paths:\n{listing}"
        )


class ConfigInvalidError(AuthError):
    """Configuration is present but malformed.

    ``field`` is the dotted path of the offending field (``firebase.apiKey``).
    """

    code = CONFIG_INVALID

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.field = field
        text = f"Config error [{field}]: {message}" if field else f"Config error: {message}"
        super().__init__(text, cause=cause)


class AuthenticationError(AuthError):
    """Credential material or identity-provider admin call failed."""

    code = AUTH_FAILED

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)


class TokenExchangeError(AuthError):
    """The remote token exchange failed.

    ``status_code`` is set when the endpoint answered with a non-success
    status; it is ``None`` for transport-level failures.
    """

    code = TOKEN_EXCHANGE_FAILED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        super().__init__(message, cause=cause)


class InjectionError(AuthError):
    """Registering the init script / cookies on the page failed."""

    code = INJECTION_FAILED

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)


class UnknownProviderError(LookupError):
    """Provider name is not present in the registry."""

    def __init__(self, name: str, available: Optional[List[str]] = None):
        self.name = name
        self.available = sorted(available or [])
        known = ", ".join(self.available) or "<none>"
        super().__init__(f"Unknown provider: {name!r} (registered: {known})")
