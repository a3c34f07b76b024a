"""unitsync - keep systemd unit state in sync with package lifecycle events."""

__version__ = "1.0.0"
