from pathlib import Path
from typing import Dict, List
from pydantic import BaseModel, Field, ValidationError

from .domain.errors import ConfigError

CONFIG_DIR = Path.home() / ".rangesync"
CONFIG_FILE = CONFIG_DIR / "config"

DEFAULT_PALETTE = [
    "#9e6de3",
    "#fe4b4b",
    "#ff7e0e",
    "#0493ee",
    "#259f28",
    "#f2c80f",
    "#1c9a90",
    "#d43c83",
]

# config key -> SyncSettings field
KEYS = {
    "RANGESYNC_FOCUS_DELAY_MS": "focus_delay_ms",
    "RANGESYNC_CARET_DELAY_MS": "caret_delay_ms",
    "RANGESYNC_INPUT_THROTTLE_MS": "input_throttle_ms",
    "RANGESYNC_PALETTE": "palette",
}

class SyncSettings(BaseModel):
    """timing and color settings for the selection synchronizer."""
    focus_delay_ms: int = Field(default=30, ge=0)
    caret_delay_ms: int = Field(default=50, ge=0)
    input_throttle_ms: int = Field(default=100, ge=0)
    palette: List[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE), min_length=1)

    @property
    def focus_delay(self) -> float:
        return self.focus_delay_ms / 1000

    @property
    def caret_delay(self) -> float:
        return self.caret_delay_ms / 1000

    @property
    def input_throttle(self) -> float:
        return self.input_throttle_ms / 1000

def _read_config() -> Dict[str, str]:
    config = {}
    if not CONFIG_FILE.exists():
        return config
    try:
        with open(CONFIG_FILE, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key] = value
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def _to_fields(config: Dict[str, str]) -> dict:
    fields = {}
    for key, field in KEYS.items():
        if key not in config:
            continue
        value = config[key]
        if field == "palette":
            fields[field] = [c.strip() for c in value.split(",") if c.strip()]
        else:
            fields[field] = value
    return fields

def load_settings() -> SyncSettings:
    """load settings from the config file, falling back to defaults."""
    try:
        return SyncSettings(**_to_fields(_read_config()))
    except ValidationError:
        # bad values in the file, ignore them
        return SyncSettings()

def set_setting(key: str, value: str):
    """set one config key, preserving other config values."""
    if key not in KEYS:
        raise ConfigError(f"unknown config key '{key}'. known keys: {', '.join(KEYS)}")

    config = _read_config()
    config[key] = value
    try:
        SyncSettings(**_to_fields(config))
    except ValidationError as e:
        raise ConfigError(f"invalid value for {key}: {value}") from e

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise ConfigError(f"failed to write config file: {e}") from e
