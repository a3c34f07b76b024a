"""Application constants and defaults."""

from pathlib import Path

# Application metadata
APP_NAME = "unitsync"
APP_VERSION = "1.0.0"

# Paths
CONFIG_DIR = Path("/etc") / "unitsync"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Service manager collaborators
SYSTEMD_CONTROL_DIR = Path("/run/systemd/system")  # Present only when systemd is PID 1
HELPER_PATH = Path("/usr/bin/deb-systemd-helper")
RELOAD_COMMAND = ["systemctl", "--system", "daemon-reload"]

# Unit types understood by systemd
UNIT_KINDS = (
    "service",
    "socket",
    "timer",
    "path",
    "mount",
    "automount",
    "swap",
    "target",
    "slice",
    "scope",
    "device",
)
DEFAULT_UNIT_KIND = "service"
UNIT_SCOPES = ("system", "user")

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_LEVEL = "WARNING"
