"""Data models for lifecycle events, units and command results."""

from .command import CommandResult, CommandStatus
from .lifecycle import LifecycleAction, UnitReference

__all__ = ["CommandResult", "CommandStatus", "LifecycleAction", "UnitReference"]
