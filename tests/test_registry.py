"""Tests for provider lookup and the Supabase placeholder."""

import pytest

from playwright_auth_injector.errors import AuthError, ConfigInvalidError, UnknownProviderError
from playwright_auth_injector.models import AuthSession, StorageState, SupabaseConfig
from playwright_auth_injector.providers import (
    BaseAuthProvider,
    FirebaseAuthProvider,
    ProviderRegistry,
    SupabaseAuthProvider,
    get_provider,
)


class _DummyProvider(BaseAuthProvider):

    @property
    def name(self):
        return "dummy"

    def validate_config(self, raw):
        return dict(self._require_strings(self._require_block(raw), ("token",)))

    async def authenticate(self, config):
        return AuthSession(provider="dummy", principal_id="p", access_token=config["token"],
                           expires_at=2, issued_at=1)

    def to_storage_state(self, session, config):
        return StorageState()


class TestLookup:

    def test_builtins_registered(self):
        assert set(ProviderRegistry.list_providers()) >= {"firebase", "supabase"}
        assert isinstance(get_provider("firebase"), FirebaseAuthProvider)
        assert isinstance(get_provider("supabase"), SupabaseAuthProvider)

    def test_lookup_is_case_insensitive(self):
        assert get_provider("Firebase") is get_provider("firebase")

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError) as exc_info:
            get_provider("auth0")
        assert not isinstance(exc_info.value, AuthError)
        assert exc_info.value.name == "auth0"

    def test_register_and_reset(self):
        ProviderRegistry.register(_DummyProvider)
        assert ProviderRegistry.is_registered("dummy")
        assert get_provider("dummy").validate_config({"token": "t"}) == {"token": "t"}

        ProviderRegistry.reset()
        assert not ProviderRegistry.is_registered("dummy")
        assert ProviderRegistry.is_registered("firebase")


class TestSupabase:

    def _raw(self, **overrides):
        raw = {"url": "https://x.supabase.co", "anonKey": "anon",
               "email": "test@example.com", "password": "pw"}
        raw.update(overrides)
        return raw

    def test_valid(self):
        assert SupabaseAuthProvider().validate_config(self._raw()) == SupabaseConfig(
            url="https://x.supabase.co", anon_key="anon", email="test@example.com", password="pw",
        )

    @pytest.mark.parametrize("missing", ["url", "anonKey", "email", "password"])
    def test_missing_field(self, missing):
        raw = self._raw()
        del raw[missing]
        with pytest.raises(ConfigInvalidError) as exc_info:
            SupabaseAuthProvider().validate_config(raw)
        assert exc_info.value.field == f"supabase.{missing}"

    @pytest.mark.asyncio
    async def test_authenticate_not_implemented(self):
        provider = SupabaseAuthProvider()
        with pytest.raises(ConfigInvalidError, match="not yet implemented"):
            await provider.authenticate(provider.validate_config(self._raw()))
