"""Outcome of a single call to an external collaborator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CommandStatus(Enum):
    """How a collaborator call ended."""

    OK = "ok"
    FAILED = "failed"      # Ran, exited non-zero
    TIMEOUT = "timeout"
    ERROR = "error"        # Could not be started
    SKIPPED = "skipped"    # Collaborator not available


@dataclass
class CommandResult:
    """Result of one reload or helper invocation.

    Attributes:
        description: Short label for the step (e.g., 'mask foo.socket')
        status: How the call ended
        argv: Command line that was (or would have been) run
        returncode: Process exit code, if the process ran
        stderr: Captured standard error, stripped
    """

    description: str
    status: CommandStatus
    argv: List[str] = field(default_factory=list)
    returncode: Optional[int] = None
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == CommandStatus.OK

    @property
    def attempted(self) -> bool:
        """Whether a process was actually spawned (or tried to be)."""
        return self.status != CommandStatus.SKIPPED

    def describe(self) -> str:
        """Get a one-line summary of the result.

        Returns:
            Formatted string (e.g., 'mask foo.socket: failed (exit 1): ...')
        """
        text = f"{self.description}: {self.status.value}"
        if self.returncode is not None and self.status == CommandStatus.FAILED:
            text += f" (exit {self.returncode})"
        if self.stderr:
            text += f": {self.stderr}"
        return text

    @classmethod
    def skipped(cls, description: str, reason: str = "") -> 'CommandResult':
        return cls(description=description, status=CommandStatus.SKIPPED, stderr=reason)
