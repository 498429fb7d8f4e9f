"""Tests for the ``python -m playwright_auth_injector`` commands."""

from unittest.mock import AsyncMock, patch

from conftest import firebase_config_dict

from playwright_auth_injector.__main__ import SAMPLE_CONFIG, main


class TestCheck:

    def test_valid_config(self, write_config, capsys):
        path = write_config({
            "provider": "firebase",
            "firebase": firebase_config_dict(),
            "profiles": {"admin": {"uid": "a"}},
        })
        assert main(["check", "--config", path]) == 0
        out = capsys.readouterr().out
        assert "firebase" in out
        assert "admin" in out

    def test_missing_config(self, tmp_path):
        assert main(["check", "--config", str(tmp_path / "nope.json")]) == 1

    def test_invalid_config(self, write_config):
        path = write_config({"provider": "firebase", "firebase": {"apiKey": "k"}})
        assert main(["check", "--config", path]) == 1


class TestInit:

    def test_writes_sample(self, tmp_path):
        target = tmp_path / "playwright_auth_config.py"
        assert main(["init", "--path", str(target)]) == 0
        assert target.read_text() == SAMPLE_CONFIG

    def test_refuses_overwrite(self, tmp_path):
        target = tmp_path / "playwright_auth_config.py"
        target.write_text("# mine\n")
        assert main(["init", "--path", str(target)]) == 1
        assert target.read_text() == "# mine\n"

    def test_force_overwrites(self, tmp_path):
        target = tmp_path / "playwright_auth_config.py"
        target.write_text("# mine\n")
        assert main(["init", "--path", str(target), "--force"]) == 0
        assert "define_config" in target.read_text()


class TestSetup:

    def test_passes_arguments(self, tmp_path, capsys):
        fake = AsyncMock(return_value=str(tmp_path / "user.json"))
        with patch("playwright_auth_injector.auth_setup.auth_setup", fake):
            code = main([
                "setup", "--base-url", "http://app.test", "--output-dir", str(tmp_path),
                "--profile", "admin", "--wait-after", "500",
            ])
        assert code == 0
        kwargs = fake.await_args.kwargs
        assert kwargs["base_url"] == "http://app.test"
        assert kwargs["output_dir"] == str(tmp_path)
        assert kwargs["profile"] == "admin"
        assert kwargs["wait_after"] == 500
        assert kwargs["headless"] is True
        assert "user.json" in capsys.readouterr().out
