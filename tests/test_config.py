"""test suite for synchronizer settings."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rangesync import config
from rangesync.config import DEFAULT_PALETTE, SyncSettings, load_settings, set_setting
from rangesync.domain.errors import ConfigError


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "rangesync" / "config"
    monkeypatch.setattr(config, "CONFIG_FILE", path)
    return path


class TestSyncSettings:
    def test_defaults(self):
        settings = SyncSettings()
        assert settings.focus_delay_ms == 30
        assert settings.caret_delay_ms == 50
        assert settings.input_throttle_ms == 100
        assert settings.palette == DEFAULT_PALETTE

    def test_seconds(self):
        settings = SyncSettings(focus_delay_ms=250)
        assert settings.focus_delay == pytest.approx(0.25)
        assert settings.input_throttle == pytest.approx(0.1)

    def test_palette_not_shared(self):
        a = SyncSettings()
        a.palette.append("#000000")
        assert SyncSettings().palette == DEFAULT_PALETTE


class TestLoadSettings:
    def test_missing_file(self, config_file):
        assert load_settings() == SyncSettings()

    def test_reads_values(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("RANGESYNC_FOCUS_DELAY_MS=10\nRANGESYNC_PALETTE=#111111, #222222\nOTHER=x\n")
        settings = load_settings()
        assert settings.focus_delay_ms == 10
        assert settings.palette == ["#111111", "#222222"]
        assert settings.caret_delay_ms == 50

    def test_bad_values_fall_back_to_defaults(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("RANGESYNC_FOCUS_DELAY_MS=soon\n")
        assert load_settings() == SyncSettings()


class TestSetSetting:
    def test_set_creates_file(self, config_file):
        set_setting("RANGESYNC_CARET_DELAY_MS", "75")
        assert config_file.read_text() == "RANGESYNC_CARET_DELAY_MS=75\n"
        assert load_settings().caret_delay_ms == 75

    def test_set_preserves_other_keys(self, config_file):
        set_setting("RANGESYNC_CARET_DELAY_MS", "75")
        set_setting("RANGESYNC_INPUT_THROTTLE_MS", "20")
        settings = load_settings()
        assert settings.caret_delay_ms == 75
        assert settings.input_throttle_ms == 20

    def test_unknown_key(self, config_file):
        with pytest.raises(ConfigError, match="unknown config key"):
            set_setting("RANGESYNC_NOPE", "1")
        assert not config_file.exists()

    def test_invalid_value(self, config_file):
        with pytest.raises(ConfigError, match="invalid value"):
            set_setting("RANGESYNC_FOCUS_DELAY_MS", "-5")
        assert not config_file.exists()

    def test_empty_palette_rejected(self, config_file):
        with pytest.raises(ConfigError):
            set_setting("RANGESYNC_PALETTE", " , ")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
