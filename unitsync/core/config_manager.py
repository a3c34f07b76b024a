"""Configuration manager for loading hook settings and units."""

import logging
import shlex
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from ..models.lifecycle import UnitReference
from ..utils.constants import (
    CONFIG_FILE,
    DEFAULT_LOG_LEVEL,
    HELPER_PATH,
    RELOAD_COMMAND,
    SYSTEMD_CONTROL_DIR,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_nonempty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_command(value: Any) -> bool:
    """Accept a non-empty argv list or a shell-style command string."""
    if isinstance(value, list):
        return bool(value) and all(_is_nonempty_str(arg) for arg in value)
    if not _is_nonempty_str(value):
        return False
    try:
        return bool(shlex.split(value))
    except ValueError:
        return False


class ConfigManager:
    """Loads the units to synchronize and collaborator settings.

    The configuration is read-only: the hook never writes files.
    """

    CONFIG_VERSION = "1.0"

    # Per-key type checks; a failing value is replaced by its default
    SETTING_CHECKS: Dict[str, Callable[[Any], bool]] = {
        "control_dir": _is_nonempty_str,
        "helper_path": _is_nonempty_str,
        "reload_command": _is_command,
        "command_timeout": lambda v: v is None or (
            isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0
        ),
        "strict_actions": lambda v: isinstance(v, bool),
        "log_level": lambda v: isinstance(v, str) and v.upper() in LOG_LEVELS,
        "log_file": lambda v: v is None or _is_nonempty_str(v),
    }

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            config_file: Path to the YAML config, defaults to CONFIG_FILE
        """
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.units: List[UnitReference] = []
        self.settings: Dict[str, Any] = {}
        self._ensure_default_settings()

    def load_config(self) -> bool:
        """Load configuration from file.

        Returns:
            True if config loaded successfully, False if defaults are in use
        """
        if not self.config_file.exists():
            logger.info(f"Config file {self.config_file} not found, using defaults")
            self._load_defaults()
            return False

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.warning("Empty config file, using defaults")
                self._load_defaults()
                return False

            if not self._validate_config(data):
                logger.error("Invalid config file, using defaults")
                self._load_defaults()
                return False

            self.units = []
            for unit_data in data.get("units", []):
                try:
                    self.units.append(self._parse_unit(unit_data))
                except (KeyError, TypeError, ValueError) as e:
                    logger.error(f"Failed to load unit config {unit_data!r}: {e}")

            self.settings = data.get("settings", {})
            self._validate_settings()
            self._ensure_default_settings()

            logger.info(f"Loaded {len(self.units)} units from config")
            return True

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            self._load_defaults()
            return False
        except UnicodeDecodeError as e:
            logger.error(f"Config file is not valid UTF-8: {e}")
            self._load_defaults()
            return False
        except OSError as e:
            logger.error(f"Failed to read config: {e}")
            self._load_defaults()
            return False

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        return self.settings.get(key, default)

    @staticmethod
    def _parse_unit(unit_data) -> UnitReference:
        """Build a UnitReference from a mapping or a 'name.kind' string."""
        if isinstance(unit_data, str):
            return UnitReference.from_string(unit_data)
        return UnitReference.from_dict(unit_data)

    def _validate_config(self, data: dict) -> bool:
        """Validate configuration data structure.

        Args:
            data: Configuration dictionary

        Returns:
            True if valid, False otherwise
        """
        if not isinstance(data, dict):
            logger.error("Config must be a dictionary")
            return False

        if "version" not in data:
            logger.warning("Config missing version, assuming valid")

        if "units" in data and not isinstance(data["units"], list):
            logger.error("Units must be a list")
            return False

        if "settings" in data and not isinstance(data["settings"], dict):
            logger.error("Settings must be a dictionary")
            return False

        return True

    def _validate_settings(self):
        """Drop setting values of the wrong type so their defaults apply."""
        for key, check in self.SETTING_CHECKS.items():
            if key in self.settings and not check(self.settings[key]):
                logger.error(f"Invalid value for setting '{key}': {self.settings[key]!r}, using default")
                del self.settings[key]

    def _load_defaults(self):
        """Load default configuration."""
        self.units = []
        self.settings = {}
        self._ensure_default_settings()
        logger.debug("Loaded default configuration")

    def _ensure_default_settings(self):
        """Ensure all default settings exist."""
        defaults = {
            "control_dir": str(SYSTEMD_CONTROL_DIR),
            "helper_path": str(HELPER_PATH),
            "reload_command": list(RELOAD_COMMAND),
            "command_timeout": None,  # Defer to the tool's own policy
            "strict_actions": False,
            "log_level": DEFAULT_LOG_LEVEL,
            "log_file": None
        }

        for key, value in defaults.items():
            if key not in self.settings:
                self.settings[key] = value
