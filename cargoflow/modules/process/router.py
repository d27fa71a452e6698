"""Process workflow API router: registration, event transitions, reads."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from cargoflow.exceptions import NotFoundException
from cargoflow.modules.inventory.schemas import DeliveryCreate, ProductCreate, TransportCreate
from cargoflow.modules.process.dependencies import get_state_machine
from cargoflow.modules.process.schemas import InboundConfirmationRequest, ProcessDetailResponse
from cargoflow.modules.process.state_machine import ProcessStateMachine
from cargoflow.modules.stats.schemas import DashboardStats
from cargoflow.schemas.responses import ERROR_RESPONSES

router = APIRouter(prefix="/processes", tags=["processes"], responses=ERROR_RESPONSES)
stats_router = APIRouter(prefix="/stats", tags=["stats"])


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[ProcessDetailResponse])
async def list_processes(machine: ProcessStateMachine = Depends(get_state_machine)):
    """Every process with its product, transport, delivery and PDF records."""
    items = await machine.list_processes()
    return [ProcessDetailResponse.from_details(d) for d in items]


@router.get("/active", response_model=list[ProcessDetailResponse])
async def list_active_processes(machine: ProcessStateMachine = Depends(get_state_machine)):
    """Processes that are in progress or paused."""
    items = await machine.list_active_processes()
    return [ProcessDetailResponse.from_details(d) for d in items]


@router.get("/{process_id}", response_model=ProcessDetailResponse)
async def get_process(
    process_id: uuid.UUID,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    details = await machine.get_process(process_id)
    if details is None:
        raise NotFoundException(f"Process {process_id} not found")
    return ProcessDetailResponse.from_details(details)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.post("/", response_model=ProcessDetailResponse, status_code=201)
async def register_product(
    body: ProductCreate,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    """Register a product and open its process at event 1."""
    details = await machine.register_product(body)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/transport", response_model=ProcessDetailResponse)
async def submit_transport(
    process_id: uuid.UUID,
    body: TransportCreate,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    """Record driver and vehicle; both flows move to event 3."""
    details = await machine.submit_transport(process_id, body)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/delivery", response_model=ProcessDetailResponse)
async def submit_delivery(
    process_id: uuid.UUID,
    body: DeliveryCreate,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    """Record route and departure for an outbound process (event 4)."""
    details = await machine.submit_delivery(process_id, body)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/confirmation", response_model=ProcessDetailResponse)
async def complete_inbound_confirmation(
    process_id: uuid.UUID,
    body: InboundConfirmationRequest,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    """Confirm reception of an inbound process or register a complaint."""
    details = await machine.complete_inbound_confirmation(process_id, body)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/complete", response_model=ProcessDetailResponse)
async def complete_process(
    process_id: uuid.UUID,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    details = await machine.complete_process(process_id)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/pause", response_model=ProcessDetailResponse)
async def pause_process(
    process_id: uuid.UUID,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    details = await machine.pause_process(process_id)
    return ProcessDetailResponse.from_details(details)


@router.post("/{process_id}/resume", response_model=ProcessDetailResponse)
async def resume_process(
    process_id: uuid.UUID,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    details = await machine.resume_process(process_id)
    return ProcessDetailResponse.from_details(details)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@stats_router.get("", response_model=DashboardStats)
async def get_stats(machine: ProcessStateMachine = Depends(get_state_machine)):
    """Dashboard counters, recomputed on every call."""
    return await machine.get_stats()
