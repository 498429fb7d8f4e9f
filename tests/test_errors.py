"""Tests for the error taxonomy."""

import pytest

from playwright_auth_injector.errors import (
    AUTH_FAILED,
    CONFIG_INVALID,
    CONFIG_NOT_FOUND,
    INJECTION_FAILED,
    TOKEN_EXCHANGE_FAILED,
    AuthError,
    AuthenticationError,
    ConfigInvalidError,
    ConfigNotFoundError,
    InjectionError,
    TokenExchangeError,
    UnknownProviderError,
)


class TestCodes:

    @pytest.mark.parametrize("error, code", [
        (ConfigNotFoundError(["/a"]), CONFIG_NOT_FOUND),
        (ConfigInvalidError("bad"), CONFIG_INVALID),
        (AuthenticationError("bad"), AUTH_FAILED),
        (TokenExchangeError("bad"), TOKEN_EXCHANGE_FAILED),
        (InjectionError("bad"), INJECTION_FAILED),
    ])
    def test_each_kind_carries_its_code(self, error, code):
        assert isinstance(error, AuthError)
        assert error.code == code

    def test_unknown_provider_is_not_an_auth_error(self):
        err = UnknownProviderError("auth0", ["firebase"])
        assert not isinstance(err, AuthError)
        assert isinstance(err, LookupError)
        assert "auth0" in str(err)
        assert "firebase" in str(err)


class TestContext:

    def test_config_not_found_lists_every_path(self):
        err = ConfigNotFoundError(["/tmp/a.py", "/tmp/b.json"])
        assert err.search_paths == ["/tmp/a.py", "/tmp/b.json"]
        assert "/tmp/a.py" in str(err)
        assert "/tmp/b.json" in str(err)

    def test_config_invalid_names_field(self):
        err = ConfigInvalidError("apiKey must be a string", "firebase.apiKey")
        assert err.field == "firebase.apiKey"
        assert str(err) == "Config error [firebase.apiKey]: apiKey must be a string"

    def test_config_invalid_without_field(self):
        err = ConfigInvalidError("Config must be a mapping")
        assert err.field is None
        assert str(err) == "Config error: Config must be a mapping"

    def test_token_exchange_status(self):
        assert TokenExchangeError("x", status_code=401).status_code == 401
        assert TokenExchangeError("x").status_code is None

    def test_cause_is_kept(self):
        root = RuntimeError("boom")
        err = AuthenticationError("wrapped", root)
        assert err.cause is root
