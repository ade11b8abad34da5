"""Tests for configuration and settings."""

import yaml

from plainfit.config import DATA_DIR_ENV, Settings, SettingsFile, get_data_dir
from plainfit.models import UnitSystem, WeekStart


class TestDataDir:
    """Tests for get_data_dir."""

    def test_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "from_env"))
        assert get_data_dir(tmp_path / "explicit") == tmp_path / "explicit"

    def test_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "from_env"))
        data_dir = get_data_dir()
        assert data_dir == tmp_path / "from_env"
        assert data_dir.is_dir()


class TestSettings:
    """Tests for Settings and SettingsFile."""

    def test_defaults(self, tmp_path):
        settings = SettingsFile(tmp_path / "settings.yaml").load()
        assert settings.week_start is WeekStart.SUNDAY
        assert settings.unit_system is UnitSystem.IMPERIAL

    def test_save_and_load(self, tmp_path):
        settings_file = SettingsFile(tmp_path / "nested" / "settings.yaml")
        settings_file.save(Settings(week_start=WeekStart.MONDAY, unit_system=UnitSystem.METRIC))

        loaded = settings_file.load()
        assert loaded.week_start is WeekStart.MONDAY
        assert loaded.unit_system is UnitSystem.METRIC

        data = yaml.safe_load((tmp_path / "nested" / "settings.yaml").read_text())
        assert data == {"week_start": "monday", "unit_system": "metric"}

    def test_invalid_values_fall_back(self):
        settings = Settings.from_dict({"week_start": "wednesday", "unit_system": "METRIC"})
        assert settings.week_start is WeekStart.SUNDAY
        assert settings.unit_system is UnitSystem.METRIC

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n")
        assert SettingsFile(path).load() == Settings()
