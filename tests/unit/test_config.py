"""Tests for configuration loading."""
from unittest.mock import patch

import pytest

from client_portal.config import PortalConfig, load_config, reload_config, get_config


@pytest.mark.usefixtures("clean_config_env")
class TestConfig:

    def test_defaults(self):
        config = PortalConfig()
        assert config.api.session_cookie_name == "connect.sid"
        assert config.display.currency_symbol == "$"
        assert config.display.recent_limit == 5
        assert config.display.copy_feedback_s == 2.0

    def test_missing_file_gives_defaults(self):
        config = load_config("/nonexistent.yml")
        assert config == PortalConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "portal.yml"
        path.write_text(
            "api:\n"
            "  base_url: https://portal.acme.test\n"
            "display:\n"
            "  currency_symbol: 'EUR '\n"
            "  recent_limit: 3\n"
        )
        config = load_config(str(path))
        assert config.api.base_url == "https://portal.acme.test"
        assert config.display.currency_symbol == "EUR "
        assert config.display.recent_limit == 3
        assert config.display.date_format == "%m/%d/%Y"

    def test_env_override_beats_yaml(self, tmp_path):
        path = tmp_path / "portal.yml"
        path.write_text("display:\n  recent_limit: 3\n")
        with patch.dict("os.environ", {"CONFIG__DISPLAY__RECENT_LIMIT": "8"}):
            config = load_config(str(path))
        assert config.display.recent_limit == 8

    @patch.dict("os.environ", {"PORTAL_SESSION_COOKIE": "s%3Aabc"})
    def test_session_cookie_from_env(self):
        config = load_config("/nonexistent.yml")
        assert config.api.session_cookie == "s%3Aabc"

    def test_reload_replaces_singleton(self, tmp_path):
        path = tmp_path / "portal.yml"
        path.write_text("display:\n  recent_limit: 4\n")
        reloaded = reload_config(str(path))
        assert get_config() is reloaded
        assert get_config().display.recent_limit == 4
        reload_config("/nonexistent.yml")

    def test_invalid_limit_rejected(self):
        with patch.dict("os.environ", {"CONFIG__DISPLAY__RECENT_LIMIT": "0"}):
            with pytest.raises(ValueError):
                load_config("/nonexistent.yml")
