"""Dashboard counters derived from the process collection."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from cargoflow.models.enums import ProcessStatus
from cargoflow.modules.process.constants import ACTIVE_STATUSES, EVENT_IN_TRANSIT
from cargoflow.modules.stats.schemas import DashboardStats


class _ProcessState(Protocol):
    current_event: int
    status: ProcessStatus


def is_in_transit(process: _ProcessState) -> bool:
    return process.current_event == EVENT_IN_TRANSIT and process.status == ProcessStatus.IN_PROGRESS


def is_delivered(process: _ProcessState) -> bool:
    return process.status == ProcessStatus.COMPLETED


def is_active(process: _ProcessState) -> bool:
    return process.status in ACTIVE_STATUSES


def compute_stats(processes: Iterable[_ProcessState], total_products: int) -> DashboardStats:
    """Recompute every counter from scratch; nothing is cached between calls."""
    in_transit = delivered = active = 0
    for process in processes:
        in_transit += is_in_transit(process)
        delivered += is_delivered(process)
        active += is_active(process)
    return DashboardStats(
        total_products=total_products,
        in_transit=in_transit,
        delivered=delivered,
        active_processes=active,
    )
