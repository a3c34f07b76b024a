"""Pytest fixtures for unitsync tests."""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

import pytest

from unitsync.core.executor import LifecycleHookExecutor
from unitsync.core.service_manager import HelperTool, ServiceManager
from unitsync.models.lifecycle import UnitReference


@dataclass
class UnitRecord:
    """Externally observable state of one unit."""

    enabled: bool = False
    masked: bool = False


@dataclass
class FakeHost:
    """Stands in for systemctl and deb-systemd-helper.

    Every call is recorded as a tuple of the operation and its unit; unit
    state is tracked the way the helper persists it.
    """

    control_dir: Path
    helper_path: Path
    calls: List[tuple] = field(default_factory=list)
    units: Dict[str, UnitRecord] = field(default_factory=dict)
    fail_on: Set[str] = field(default_factory=set)
    timeout_on: Set[str] = field(default_factory=set)
    environments: List[dict] = field(default_factory=list)

    def state(self, unit_name: str) -> UnitRecord:
        return self.units.setdefault(unit_name, UnitRecord())

    def enable(self, unit_name: str):
        self.state(unit_name).enabled = True

    def remove_systemd(self):
        self.control_dir.rmdir()

    def remove_helper(self):
        self.helper_path.unlink()

    @property
    def operations(self) -> List[str]:
        return [call[0] for call in self.calls]

    def run(self, argv, capture_output=False, text=False, timeout=None, env=None, check=False):
        self.environments.append(env)
        if argv[0] == str(self.helper_path):
            args = [a for a in argv[1:] if a != "--user"]
            operation, unit_name = args[0], args[1]
            call = (operation, unit_name)
        else:
            operation, unit_name = "daemon-reload", None
            call = (operation,)

        self.calls.append(call)

        if operation in self.timeout_on:
            raise subprocess.TimeoutExpired(argv, timeout or 0)

        if operation in self.fail_on:
            if check:
                raise subprocess.CalledProcessError(1, argv, output="", stderr=f"{operation} failed\n")
            return subprocess.CompletedProcess(argv, 1, stdout="", stderr=f"{operation} failed\n")

        if unit_name is not None:
            record = self.state(unit_name)
            if operation == "mask":
                record.masked = True
            elif operation == "unmask":
                record.masked = False
            elif operation == "purge":
                record.enabled = False

        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")


@pytest.fixture
def socket_unit() -> UnitReference:
    """The unit the hook is configured for."""
    return UnitReference(name="tedge-file-transfer", kind="socket")


@pytest.fixture
def host(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeHost:
    """A host with systemd running and the helper installed."""
    control_dir = tmp_path / "run" / "systemd" / "system"
    control_dir.mkdir(parents=True)

    helper_path = tmp_path / "bin" / "deb-systemd-helper"
    helper_path.parent.mkdir()
    helper_path.write_text("#!/bin/sh\nexit 0\n")
    helper_path.chmod(0o755)

    fake = FakeHost(control_dir=control_dir, helper_path=helper_path)
    monkeypatch.setattr("unitsync.core.service_manager.subprocess.run", fake.run)
    return fake


@pytest.fixture
def executor(host: FakeHost, socket_unit: UnitReference) -> LifecycleHookExecutor:
    """Executor wired to the fake host."""
    return LifecycleHookExecutor(
        units=[socket_unit],
        service_manager=ServiceManager(control_dir=host.control_dir),
        helper=HelperTool(path=host.helper_path),
    )
