"""Pure transition checks over the per-flow tables in ``constants``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cargoflow.exceptions import BusinessRuleException
from cargoflow.models.enums import FlowType, ProcessStatus
from cargoflow.modules.process.constants import (
    EVENT_TRANSITIONS,
    NEXT_STEPS,
    TERMINAL_STATUSES,
    NextStep,
    ProcessAction,
)

if TYPE_CHECKING:
    from cargoflow.models.process import Process


def validate_transition(
    process: Process,
    action: ProcessAction,
    flow_type: FlowType | None = None,
) -> int:
    """Return the event *action* moves *process* to.

    *flow_type* overrides the table the action is looked up in; it defaults
    to the process's own type. Raises :class:`BusinessRuleException` when the
    action is not part of the flow, the process is at another event, or its
    status does not accept event actions.
    """
    table = EVENT_TRANSITIONS[flow_type or process.process_type]
    if action not in table:
        raise BusinessRuleException(
            f"Action '{action.value}' is not part of the "
            f"'{process.process_type.value}' flow. "
            f"Allowed actions: {[a.value for a in table]}"
        )

    if process.status in TERMINAL_STATUSES:
        raise BusinessRuleException(
            f"Process {process.id} is already '{process.status.value}'"
        )
    if process.status == ProcessStatus.PAUSED:
        raise BusinessRuleException(
            f"Process {process.id} is paused; resume it before '{action.value}'"
        )

    from_event, to_event = table[action]
    if process.current_event != from_event:
        raise BusinessRuleException(
            f"Cannot '{action.value}' at event {process.current_event}. "
            f"Expected event {from_event}"
        )
    return to_event


def ensure_not_terminal(process: Process) -> None:
    """Pause and resume are refused once a process has reached its outcome."""
    if process.status in TERMINAL_STATUSES:
        raise BusinessRuleException(
            f"Process {process.id} is already '{process.status.value}'"
        )


def next_step(process: Process) -> NextStep:
    """Step the client should be routed to, read from the persisted process."""
    if process.status in TERMINAL_STATUSES:
        return NextStep.NONE
    return NEXT_STEPS[process.process_type].get(process.current_event, NextStep.NONE)
