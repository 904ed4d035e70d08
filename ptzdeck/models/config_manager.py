"""
Configuration manager for JSON persistence
"""

import copy
import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ptzdeck.constants import LoggingConstants, NetworkConstants
from ptzdeck.controllers.visca_commands import ViscaLimits
from ptzdeck.exceptions import ConfigLoadError, ConfigSaveError
from ptzdeck.utils import get_app_data_dir

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1


class ViscaFraming(Enum):
    """How encoded packets are wrapped on the wire"""

    RAW = "raw"  # bare VISCA bytes
    VISCA_OVER_IP = "visca_over_ip"  # 8-byte Sony header + VISCA bytes


@dataclass(frozen=True)
class ControlSettings:
    """Defaults applied by CameraConnection when an intent omits a value"""

    pan_speed: int = ViscaLimits.DEFAULT_PAN_SPEED
    tilt_speed: int = ViscaLimits.DEFAULT_TILT_SPEED
    zoom_speed: int = ViscaLimits.DEFAULT_ZOOM_SPEED
    focus_speed: int | None = None
    default_port: int = NetworkConstants.VISCA_DEFAULT_PORT
    framing: ViscaFraming = ViscaFraming.RAW
    bind_to_camera_interface: bool = False


# key -> (min, max) for integer control values
_SPEED_RANGES = {
    "pan_speed": (ViscaLimits.PAN_SPEED_MIN, ViscaLimits.PAN_SPEED_MAX),
    "tilt_speed": (ViscaLimits.TILT_SPEED_MIN, ViscaLimits.TILT_SPEED_MAX),
    "zoom_speed": (ViscaLimits.ZOOM_SPEED_MIN, ViscaLimits.ZOOM_SPEED_MAX),
    "focus_speed": (ViscaLimits.FOCUS_SPEED_MIN, ViscaLimits.FOCUS_SPEED_MAX),
    "default_port": (NetworkConstants.PORT_MIN, NetworkConstants.PORT_MAX),
}


class ConfigManager:
    """Manages application configuration persistence"""

    def __init__(self, config_path: Path | None = None):
        if config_path is None:
            config_path = get_app_data_dir() / "config.json"
        self.config_path = Path(config_path)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config = self.load()
        if self._normalize():
            self.save()

    @staticmethod
    def _default_schema() -> dict:
        """Return default configuration structure"""
        defaults = ControlSettings()
        return {
            "version": CONFIG_VERSION,
            "control": {
                "pan_speed": defaults.pan_speed,
                "tilt_speed": defaults.tilt_speed,
                "zoom_speed": defaults.zoom_speed,
                "focus_speed": defaults.focus_speed,
                "default_port": defaults.default_port,
                "framing": defaults.framing.value,
                "bind_to_camera_interface": defaults.bind_to_camera_interface,
            },
            "logging": {
                "file_logging_enabled": False,
                "level": LoggingConstants.DEFAULT_LEVEL,
            },
        }

    def _normalize(self) -> bool:
        """Fill missing sections and clamp control values. Returns True if changed."""
        changed = False
        defaults = self._default_schema()

        if not isinstance(self.config, dict):
            self.config = defaults
            return True

        for section in ("control", "logging"):
            if not isinstance(self.config.get(section), dict):
                self.config[section] = copy.deepcopy(defaults[section])
                changed = True
                continue
            for key, value in defaults[section].items():
                if key not in self.config[section]:
                    self.config[section][key] = value
                    changed = True

        if self.config.get("version") != CONFIG_VERSION:
            self.config["version"] = CONFIG_VERSION
            changed = True

        control = self.config["control"]
        for key, (low, high) in _SPEED_RANGES.items():
            value = control.get(key)
            if value is None and key == "focus_speed":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                logger.warning(f"Invalid {key} in config: {value!r}, using default")
                control[key] = defaults["control"][key]
                changed = True
            elif not low <= value <= high:
                clamped = max(low, min(high, value))
                logger.warning(f"{key}={value} out of range, clamped to {clamped}")
                control[key] = clamped
                changed = True

        try:
            ViscaFraming(control.get("framing"))
        except ValueError:
            logger.warning(f"Unknown framing {control.get('framing')!r}, using raw")
            control["framing"] = ViscaFraming.RAW.value
            changed = True

        if not isinstance(control.get("bind_to_camera_interface"), bool):
            control["bind_to_camera_interface"] = bool(control.get("bind_to_camera_interface"))
            changed = True

        return changed

    def load(self) -> dict:
        """Load configuration from JSON file"""
        if self.config_path.exists():
            try:
                with self.config_path.open(encoding="utf-8") as f:
                    config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_path}")
                return config
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in config file: {e}")
                raise ConfigLoadError(f"Invalid JSON: {e}") from e
            except OSError as e:
                logger.error(f"Error reading config file: {e}")
                raise ConfigLoadError(f"Cannot read config: {e}") from e

        logger.info("No config file found, using defaults")
        return self._default_schema()

    def save(self) -> None:
        """Save configuration to JSON file"""
        try:
            with self.config_path.open("w", encoding="utf-8") as f:
                json.dump(self.config, f, indent=2)
            logger.debug(f"Configuration saved to {self.config_path}")
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            raise ConfigSaveError(f"Cannot save config: {e}") from e

    def get_control_settings(self) -> ControlSettings:
        control = self.config["control"]
        return ControlSettings(
            pan_speed=control["pan_speed"],
            tilt_speed=control["tilt_speed"],
            zoom_speed=control["zoom_speed"],
            focus_speed=control["focus_speed"],
            default_port=control["default_port"],
            framing=ViscaFraming(control["framing"]),
            bind_to_camera_interface=control["bind_to_camera_interface"],
        )

    def set_control_setting(self, key: str, value) -> None:
        """Update one control value, normalize and save"""
        if key not in self.config["control"]:
            raise KeyError(f"Unknown control setting: {key}")
        if isinstance(value, ViscaFraming):
            value = value.value
        self.config["control"][key] = value
        self._normalize()
        self.save()

    def get_logging_settings(self) -> dict:
        return dict(self.config["logging"])

    def set_file_logging_enabled(self, enabled: bool) -> None:
        self.config["logging"]["file_logging_enabled"] = enabled
        self.save()
