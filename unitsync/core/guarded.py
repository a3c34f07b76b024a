"""Run a collaborator call only when its capability probe passes."""

import logging
from typing import Callable

from ..models.command import CommandResult

logger = logging.getLogger(__name__)


def guarded_call(
    probe: Callable[[], bool],
    action: Callable[[], CommandResult],
    description: str
) -> CommandResult:
    """Execute ``action`` if ``probe`` passes.

    A probe that cannot be evaluated counts as unavailable. A failed action
    is returned as-is; the caller decides what to do with it. Anything the
    action raises propagates.

    Args:
        probe: Capability check (e.g., helper binary is executable)
        action: Collaborator call producing a CommandResult
        description: Label for the skipped result

    Returns:
        The action's result, or a skipped result
    """
    try:
        available = probe()
    except OSError as e:
        logger.debug(f"Probe for {description} failed: {e}")
        available = False

    if not available:
        logger.debug(f"Skipping {description}: collaborator not available")
        return CommandResult.skipped(description, "not available")

    return action()
