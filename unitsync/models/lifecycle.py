"""Data models for package lifecycle events and the units they act on."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.constants import DEFAULT_UNIT_KIND, UNIT_KINDS, UNIT_SCOPES


class LifecycleAction(Enum):
    """Lifecycle stages reported by the package manager to maintainer scripts."""

    CONFIGURE = "configure"
    INSTALL = "install"
    UPGRADE = "upgrade"
    REMOVE = "remove"
    DECONFIGURE = "deconfigure"
    PURGE = "purge"
    ABORT_INSTALL = "abort-install"
    ABORT_UPGRADE = "abort-upgrade"
    ABORT_REMOVE = "abort-remove"
    ABORT_DECONFIGURE = "abort-deconfigure"
    FAILED_UPGRADE = "failed-upgrade"
    DISAPPEAR = "disappear"

    @classmethod
    def from_string(cls, token: str) -> Optional['LifecycleAction']:
        """Convert a command-line token to a LifecycleAction.

        Args:
            token: First argument passed by the package manager

        Returns:
            LifecycleAction, or None if the token is not recognized
        """
        try:
            return cls(token)
        except ValueError:
            return None

    @property
    def carries_unit_effect(self) -> bool:
        """Whether this action changes unit state beyond the manager reload."""
        return self in (LifecycleAction.REMOVE, LifecycleAction.PURGE)


@dataclass(frozen=True)
class UnitReference:
    """A service manager unit acted on by the hook.

    Attributes:
        name: Unit name without the type suffix (e.g., 'tedge-agent')
        kind: Unit type (e.g., 'service', 'socket', 'timer')
        scope: Either 'system' or 'user'
    """

    name: str
    kind: str = DEFAULT_UNIT_KIND
    scope: str = "system"

    def __post_init__(self):
        """Validate the unit reference after initialization."""
        if not self.name:
            raise ValueError("Unit name cannot be empty")

        if "/" in self.name or any(c.isspace() for c in self.name):
            raise ValueError(f"Invalid unit name: {self.name!r}")

        if self.kind not in UNIT_KINDS:
            raise ValueError(f"Invalid unit kind: {self.kind}. Must be one of {', '.join(UNIT_KINDS)}")

        if self.scope not in UNIT_SCOPES:
            raise ValueError(f"Invalid scope: {self.scope}. Must be 'system' or 'user'")

    @property
    def unit_name(self) -> str:
        """Full unit name as understood by systemd (e.g., 'foo.socket')."""
        return f"{self.name}.{self.kind}"

    def is_user_unit(self) -> bool:
        """Check if this is a user unit.

        Returns:
            True if user unit, False if system unit
        """
        return self.scope == "user"

    def __str__(self) -> str:
        return self.unit_name

    @classmethod
    def from_string(cls, value: str, scope: str = "system") -> 'UnitReference':
        """Parse a full unit name such as 'foo.socket'.

        A name without a recognized type suffix is taken as a service.

        Args:
            value: Unit name, with or without its type suffix
            scope: Either 'system' or 'user'

        Returns:
            UnitReference instance
        """
        name, sep, kind = value.strip().rpartition(".")
        if sep and kind in UNIT_KINDS:
            return cls(name=name, kind=kind, scope=scope)
        return cls(name=value.strip(), scope=scope)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary representation of the unit reference
        """
        return {
            "name": self.name,
            "kind": self.kind,
            "scope": self.scope
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'UnitReference':
        """Create UnitReference from dictionary.

        Args:
            data: Dictionary with unit configuration

        Returns:
            UnitReference instance
        """
        return cls(
            name=data["name"],
            kind=data.get("kind", DEFAULT_UNIT_KIND),
            scope=data.get("scope", "system")
        )
