"""
Tests for configuration loading.
"""

from datetime import date

import pytest
import yaml

from smg_daily_dates.config.manager import ConfigManager
from smg_daily_dates.data.schemas import HolidaySourceType


@pytest.fixture
def config_file(tmp_path):
    """Write a nested settings file and return its path."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        yaml.dump(
            {
                "holidays": {
                    "source": "static",
                    "table": "holiday_calendar",
                    "dates": ["2024-01-01", "2024-12-25"],
                },
                "supabase": {"url": "https://file.supabase.co", "key": None},
                "lookback": {"default_days": 5},
                "logging": {"level": "DEBUG"},
                "api": {"port": 8080},
            }
        ),
        encoding="utf-8",
    )
    return str(path)


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = ConfigManager(str(tmp_path / "missing.yaml")).load_config()

        assert config.holiday_source == HolidaySourceType.SUPABASE
        assert config.holiday_table == "calendar"
        assert config.default_lookback_days == 3
        assert config.api_port == 3000
        assert config.supabase_url is None

    def test_bundled_settings_load(self):
        config = ConfigManager().load_config()

        assert config.holiday_table == "calendar"
        assert config.static_holidays == []

    def test_nested_yaml_is_flattened(self, config_file):
        config = ConfigManager(config_file).load_config()

        assert config.holiday_source == HolidaySourceType.STATIC
        assert config.holiday_table == "holiday_calendar"
        assert config.static_holidays == [date(2024, 1, 1), date(2024, 12, 25)]
        assert config.supabase_url == "https://file.supabase.co"
        assert config.supabase_key is None
        assert config.default_lookback_days == 5
        assert config.log_level == "DEBUG"
        assert config.api_port == 8080

    def test_environment_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
        monkeypatch.setenv("SMG_HOLIDAY_SOURCE", "supabase")
        monkeypatch.setenv("SMG_HOLIDAY_TIMEOUT", "2.5")
        monkeypatch.setenv("PORT", "9000")

        config = ConfigManager(config_file).load_config()

        assert config.supabase_url == "https://env.supabase.co"
        assert config.supabase_key == "anon"
        assert config.holiday_source == HolidaySourceType.SUPABASE
        assert config.holiday_timeout == 2.5
        assert config.api_port == 9000

    def test_prefixed_variables_win(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("SMG_API_PORT", "9100")

        config = ConfigManager(str(tmp_path / "missing.yaml")).load_config()

        assert config.api_port == 9100

    def test_invalid_typed_override_is_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SMG_DEFAULT_DAYS", "three")

        config = ConfigManager(str(tmp_path / "missing.yaml")).load_config()

        assert config.default_lookback_days == 3

    def test_out_of_range_value_is_rejected(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SMG_DEFAULT_DAYS", "25")

        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigManager(str(tmp_path / "missing.yaml")).load_config()

    def test_broken_yaml_is_rejected(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("holidays: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            ConfigManager(str(path)).load_config()

    def test_save_and_reload(self, config_file, tmp_path):
        manager = ConfigManager(config_file)
        config = manager.load_config()
        saved_path = tmp_path / "out" / "saved.yaml"

        manager.save_config(config, str(saved_path))
        reloaded = ConfigManager(str(saved_path)).load_config()

        assert reloaded == config
