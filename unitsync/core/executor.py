"""Lifecycle hook executor.

Synchronizes service manager unit state with a package's lifecycle. Each
invocation is one linear pass:

1. reload the service manager's metadata, if it is running;
2. on ``remove``, mask every configured unit;
3. on ``purge``, purge and then unmask every configured unit.

Every collaborator call is guarded by an availability probe and its failure
is discarded, so the package transaction never fails because of this hook.
Only a malformed invocation is fatal.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Union

from ..models.command import CommandResult
from ..models.lifecycle import LifecycleAction, UnitReference
from ..utils.constants import EXIT_OK, EXIT_USAGE
from .guarded import guarded_call
from .service_manager import HelperTool, ServiceManager

logger = logging.getLogger(__name__)


class InvocationError(Exception):
    """The hook was called in a way its caller contract does not allow."""


@dataclass
class HookReport:
    """Everything one invocation did, in order.

    Attributes:
        action: Parsed lifecycle action, None for an unrecognized token
        token: Raw action token as received
        results: One entry per guarded step, attempted or skipped
    """

    action: Optional[LifecycleAction]
    token: str
    results: List[CommandResult] = field(default_factory=list)

    @property
    def attempted(self) -> List[CommandResult]:
        return [r for r in self.results if r.attempted]

    @property
    def failures(self) -> List[CommandResult]:
        return [r for r in self.results if r.attempted and not r.succeeded]


class LifecycleHookExecutor:
    """Applies the unit-state transitions for one lifecycle event."""

    def __init__(
        self,
        units: Sequence[UnitReference],
        service_manager: Optional[ServiceManager] = None,
        helper: Optional[HelperTool] = None,
        strict_actions: bool = False
    ):
        """Initialize the executor.

        Args:
            units: Units to act on, in order
            service_manager: Reload collaborator
            helper: Mask/purge/unmask collaborator
            strict_actions: Reject unrecognized action tokens instead of
                treating them as no-ops
        """
        self.units = list(units)
        self.service_manager = service_manager or ServiceManager()
        self.helper = helper or HelperTool()
        self.strict_actions = strict_actions

    def run(
        self,
        action: Union[str, LifecycleAction, None] = None,
        args: Sequence[str] = (),
        environment: Optional[Mapping[str, str]] = None
    ) -> int:
        """Run the hook and return its exit status.

        Args:
            action: Lifecycle action token from the package manager
            args: Further positional arguments (e.g., prior version)
            environment: Environment injected by the package manager

        Returns:
            EXIT_OK, or EXIT_USAGE for a malformed invocation
        """
        try:
            self.execute(action, args, environment)
        except InvocationError as e:
            logger.error(f"Invalid invocation: {e}")
            return EXIT_USAGE

        return EXIT_OK

    def execute(
        self,
        action: Union[str, LifecycleAction, None] = None,
        args: Sequence[str] = (),
        environment: Optional[Mapping[str, str]] = None
    ) -> HookReport:
        """Run the hook and report every step.

        Args:
            action: Lifecycle action token from the package manager
            args: Further positional arguments (e.g., prior version)
            environment: Environment injected by the package manager

        Returns:
            HookReport listing each guarded step in order

        Raises:
            InvocationError: If the action token is missing, or unrecognized
                while strict_actions is set
        """
        report = self._parse_action(action)

        if args:
            logger.debug(f"Ignoring extra arguments for {report.token}: {list(args)}")

        # Reload runs for every action
        self._record(report, guarded_call(
            self.service_manager.is_available,
            lambda: self.service_manager.daemon_reload(environment),
            "daemon-reload"
        ))

        if report.action is not None and report.action.carries_unit_effect and not self.units:
            logger.warning(f"No units configured, nothing to do for '{report.token}'")

        if report.action == LifecycleAction.REMOVE:
            for unit in self.units:
                self._record(report, self._helper_call("mask", unit, environment))

        elif report.action == LifecycleAction.PURGE:
            # Purge first so the final state never carries a mask
            for unit in self.units:
                self._record(report, self._helper_call("purge", unit, environment))
                self._record(report, self._helper_call("unmask", unit, environment))

        logger.info(
            f"Hook '{report.token}' finished: {len(report.attempted)} calls, "
            f"{len(report.failures)} failures ignored"
        )
        return report

    def _parse_action(self, action: Union[str, LifecycleAction, None]) -> HookReport:
        """Turn the raw action argument into a report skeleton.

        Args:
            action: Lifecycle action token or enum

        Returns:
            HookReport with action and token set

        Raises:
            InvocationError: If the token is missing, or unrecognized in strict mode
        """
        if isinstance(action, LifecycleAction):
            return HookReport(action=action, token=action.value)

        if action is None or not action.strip():
            raise InvocationError("no lifecycle action given")

        parsed = LifecycleAction.from_string(action)
        if parsed is None:
            if self.strict_actions:
                raise InvocationError(f"unrecognized lifecycle action: {action!r}")
            logger.warning(f"Unrecognized lifecycle action '{action}', treating as no-op")

        return HookReport(action=parsed, token=action)

    def _helper_call(
        self,
        operation: str,
        unit: UnitReference,
        environment: Optional[Mapping[str, str]]
    ) -> CommandResult:
        """Run one helper operation behind a fresh availability probe."""
        method = getattr(self.helper, operation)
        return guarded_call(
            self.helper.is_available,
            lambda: method(unit, environment),
            f"{operation} {unit.unit_name}"
        )

    @staticmethod
    def _record(report: HookReport, result: CommandResult):
        """Append a result, discarding any failure after logging it."""
        report.results.append(result)
        if result.attempted and not result.succeeded:
            logger.debug(f"Ignoring failure: {result.describe()}")
