"""Process workflow events, status groups and the per-flow transition table."""

from __future__ import annotations

import enum

from cargoflow.models.enums import FlowType, ProcessStatus

# Event numbers. Event 2 (transport entry) is never stored: submitting
# transport moves both flows straight from 1 to 3.
EVENT_REGISTERED = 1
EVENT_IN_TRANSIT = 3
EVENT_DELIVERED = 4

# Last event of each flow
FINAL_EVENT: dict[FlowType, int] = {
    FlowType.INBOUND: EVENT_IN_TRANSIT,
    FlowType.OUTBOUND: EVENT_DELIVERED,
}

# Status every new process starts in
INITIAL_STATUS = ProcessStatus.IN_PROGRESS

ACTIVE_STATUSES: frozenset[ProcessStatus] = frozenset(
    {ProcessStatus.IN_PROGRESS, ProcessStatus.PAUSED}
)

# Terminal statuses (no further transitions possible)
TERMINAL_STATUSES: frozenset[ProcessStatus] = frozenset(
    {ProcessStatus.COMPLETED, ProcessStatus.COMPLAINT}
)


class ProcessAction(str, enum.Enum):
    SUBMIT_TRANSPORT = "submit_transport"
    SUBMIT_DELIVERY = "submit_delivery"
    CONFIRM_INBOUND = "confirm_inbound"
    COMPLETE = "complete"


class NextStep(str, enum.Enum):
    TRANSPORT = "transport"
    DELIVERY = "delivery"
    CONFIRMATION = "confirmation"
    COMPLETION = "completion"
    NONE = "none"


# Valid event transitions: flow_type -> action -> (from_event, to_event).
# An action missing from a flow's table is not part of that flow.
EVENT_TRANSITIONS: dict[FlowType, dict[ProcessAction, tuple[int, int]]] = {
    FlowType.INBOUND: {
        ProcessAction.SUBMIT_TRANSPORT: (EVENT_REGISTERED, EVENT_IN_TRANSIT),
        ProcessAction.CONFIRM_INBOUND: (EVENT_IN_TRANSIT, EVENT_IN_TRANSIT),
    },
    FlowType.OUTBOUND: {
        ProcessAction.SUBMIT_TRANSPORT: (EVENT_REGISTERED, EVENT_IN_TRANSIT),
        ProcessAction.SUBMIT_DELIVERY: (EVENT_IN_TRANSIT, EVENT_DELIVERED),
        ProcessAction.COMPLETE: (EVENT_DELIVERED, EVENT_DELIVERED),
    },
}

# Step the client is routed to, per flow type and current event
NEXT_STEPS: dict[FlowType, dict[int, NextStep]] = {
    FlowType.INBOUND: {
        EVENT_REGISTERED: NextStep.TRANSPORT,
        EVENT_IN_TRANSIT: NextStep.CONFIRMATION,
        # Only reachable with strict_flow_guards off
        EVENT_DELIVERED: NextStep.COMPLETION,
    },
    FlowType.OUTBOUND: {
        EVENT_REGISTERED: NextStep.TRANSPORT,
        EVENT_IN_TRANSIT: NextStep.DELIVERY,
        EVENT_DELIVERED: NextStep.COMPLETION,
    },
}
