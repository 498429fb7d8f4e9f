"""Tests for ``auth_setup`` with Playwright replaced by mocks."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import playwright_auth_injector.auth_setup as auth_setup_mod
from playwright_auth_injector.errors import ConfigNotFoundError


def _fake_playwright(mock_page, state_payload):
    context = MagicMock()
    context.new_page = AsyncMock(return_value=mock_page)
    context.close = AsyncMock()

    async def _storage_state(path, indexed_db=False):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state_payload, f)
        return state_payload

    context.storage_state = AsyncMock(side_effect=_storage_state)

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    pw.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=pw)
    return starter, pw, browser, context


class TestAuthSetup:

    @pytest.mark.asyncio
    async def test_saves_storage_state(self, tmp_path, mock_page):
        starter, pw, browser, context = _fake_playwright(
            mock_page, {"cookies": [], "origins": [{"origin": "http://app.test"}]}
        )
        inject = AsyncMock()

        with patch.object(auth_setup_mod, "async_playwright", return_value=starter), \
                patch.object(auth_setup_mod, "inject_auth", inject):
            path = await auth_setup_mod.auth_setup(
                config_path="cfg.json",
                output_dir=str(tmp_path / ".auth"),
                base_url="http://app.test",
                profile="admin",
            )

        assert path == str(tmp_path / ".auth" / "user.json")
        assert json.loads((tmp_path / ".auth" / "user.json").read_text())["origins"]
        browser.new_context.assert_awaited_once_with(base_url="http://app.test")
        context.storage_state.assert_awaited_once_with(path=path, indexed_db=True)
        assert inject.await_args.kwargs["profile"] == "admin"
        assert inject.await_args.kwargs["config_path"] == "cfg.json"
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_still_closes_browser(self, tmp_path, mock_page):
        starter, pw, browser, context = _fake_playwright(mock_page, {})
        inject = AsyncMock(side_effect=ConfigNotFoundError(["/x"]))

        with patch.object(auth_setup_mod, "async_playwright", return_value=starter), \
                patch.object(auth_setup_mod, "inject_auth", inject):
            with pytest.raises(ConfigNotFoundError):
                await auth_setup_mod.auth_setup(output_dir=str(tmp_path))

        context.storage_state.assert_not_awaited()
        browser.close.assert_awaited_once()
        pw.stop.assert_awaited_once()
