"""Utility functions and constants."""

from .constants import *

__all__ = [
    "APP_NAME",
    "CONFIG_FILE",
    "EXIT_ERROR",
    "EXIT_OK",
    "EXIT_USAGE",
    "HELPER_PATH",
    "RELOAD_COMMAND",
    "SYSTEMD_CONTROL_DIR",
]
