"""Wrappers around systemctl and deb-systemd-helper."""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from ..models.command import CommandResult, CommandStatus
from ..models.lifecycle import UnitReference
from ..utils.constants import HELPER_PATH, RELOAD_COMMAND, SYSTEMD_CONTROL_DIR

logger = logging.getLogger(__name__)


def run_command(
    argv: Sequence[str],
    description: str,
    timeout: Optional[float] = None,
    environment: Optional[Mapping[str, str]] = None
) -> CommandResult:
    """Run an external command with its output captured.

    Process-level failures are reported in the result, never raised.

    Args:
        argv: Command line to run
        description: Short label used in logs and the result
        timeout: Seconds to wait, or None to wait for the tool itself
        environment: Environment for the child, or None to inherit

    Returns:
        CommandResult describing how the command ended
    """
    argv = [str(arg) for arg in argv]
    logger.debug(f"Running: {' '.join(argv)}")

    try:
        subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=dict(environment) if environment is not None else None,
            check=True
        )
        return CommandResult(description, CommandStatus.OK, argv, returncode=0)

    except subprocess.TimeoutExpired:
        logger.debug(f"Timeout while running {description}")
        return CommandResult(description, CommandStatus.TIMEOUT, argv)

    except subprocess.CalledProcessError as e:
        stderr = e.stderr.strip() if e.stderr else ""
        return CommandResult(description, CommandStatus.FAILED, argv, returncode=e.returncode, stderr=stderr)

    except OSError as e:
        return CommandResult(description, CommandStatus.ERROR, argv, stderr=str(e))


class ServiceManager:
    """Reloads service manager metadata via systemctl."""

    def __init__(
        self,
        control_dir: Path = SYSTEMD_CONTROL_DIR,
        reload_command: Union[str, List[str], None] = None,
        timeout: Optional[float] = None
    ):
        """Initialize the service manager.

        Args:
            control_dir: Directory whose presence means the manager is running
            reload_command: Command line for the metadata reload
            timeout: Optional timeout for the reload, in seconds
        """
        self.control_dir = Path(control_dir)
        if isinstance(reload_command, str):
            reload_command = shlex.split(reload_command)
        self.reload_command = list(reload_command or RELOAD_COMMAND)
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check whether the service manager is running on this host."""
        return self.control_dir.is_dir()

    def daemon_reload(self, environment: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Ask the service manager to reload its unit files.

        Args:
            environment: Environment passed on by the package manager

        Returns:
            CommandResult for the reload
        """
        return run_command(self.reload_command, "daemon-reload", self.timeout, environment)


class HelperTool:
    """Masks, unmasks and purges units via deb-systemd-helper."""

    def __init__(self, path: Path = HELPER_PATH, timeout: Optional[float] = None):
        """Initialize the helper tool wrapper.

        Args:
            path: Path to the helper binary
            timeout: Optional timeout per call, in seconds
        """
        self.path = Path(path)
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check whether the helper binary exists and is executable."""
        return self.path.is_file() and os.access(self.path, os.X_OK)

    def mask(self, unit: UnitReference, environment: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Make a unit unstartable while keeping its enablement record.

        Args:
            unit: Unit to mask
            environment: Environment passed on by the package manager

        Returns:
            CommandResult for the call
        """
        return self._execute_helper_action("mask", unit, environment)

    def purge(self, unit: UnitReference, environment: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Erase all persisted enablement state for a unit.

        Args:
            unit: Unit to purge
            environment: Environment passed on by the package manager

        Returns:
            CommandResult for the call
        """
        return self._execute_helper_action("purge", unit, environment)

    def unmask(self, unit: UnitReference, environment: Optional[Mapping[str, str]] = None) -> CommandResult:
        """Clear a mask left behind by an earlier removal.

        Args:
            unit: Unit to unmask
            environment: Environment passed on by the package manager

        Returns:
            CommandResult for the call
        """
        return self._execute_helper_action("unmask", unit, environment)

    def _execute_helper_action(
        self,
        action: str,
        unit: UnitReference,
        environment: Optional[Mapping[str, str]]
    ) -> CommandResult:
        """Execute a helper action (mask, purge, unmask).

        Args:
            action: Helper subcommand
            unit: Unit to act on
            environment: Environment passed on by the package manager

        Returns:
            CommandResult for the call
        """
        cmd = [str(self.path)]
        if unit.is_user_unit():
            cmd.append("--user")

        cmd.extend([action, unit.unit_name])

        return run_command(cmd, f"{action} {unit.unit_name}", self.timeout, environment)
