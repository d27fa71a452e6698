"""Report projections and the generated-PDF audit log."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from cargoflow.config import settings
from cargoflow.modules.inventory.schemas import GeneratedPdfCreate, GeneratedPdfResponse
from cargoflow.modules.process.dependencies import get_state_machine
from cargoflow.modules.process.schemas import ProcessDetailResponse
from cargoflow.modules.process.state_machine import ProcessStateMachine
from cargoflow.modules.report.schemas import (
    EntryReport,
    ServiceInvoice,
    TransportInvoice,
    TransportReport,
    WarehouseReport,
)
from cargoflow.modules.report.service import ReportService
from cargoflow.repositories.dependencies import Stores, get_stores
from cargoflow.schemas.responses import ERROR_RESPONSES

router = APIRouter(
    prefix="/processes/{process_id}/reports", tags=["reports"], responses=ERROR_RESPONSES
)
pdf_router = APIRouter(prefix="/pdfs", tags=["pdfs"], responses=ERROR_RESPONSES)


def get_report_service(stores: Stores = Depends(get_stores)) -> ReportService:
    entities, processes = stores
    return ReportService(entities, processes, timezone=settings.report_timezone)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get("/warehouse", response_model=WarehouseReport)
async def warehouse_report(
    process_id: uuid.UUID,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.warehouse_report(process_id)


@router.get("/entry", response_model=EntryReport)
async def entry_report(
    process_id: uuid.UUID,
    svc: ReportService = Depends(get_report_service),
):
    """Reception report; inbound processes only."""
    return await svc.entry_report(process_id)


@router.get("/transport", response_model=TransportReport)
async def transport_report(
    process_id: uuid.UUID,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.transport_report(process_id)


@router.get("/transport-invoice", response_model=TransportInvoice)
async def transport_invoice(
    process_id: uuid.UUID,
    svc: ReportService = Depends(get_report_service),
):
    """Invoice the carrier issues for this process's transport."""
    return await svc.transport_invoice(process_id)


@router.get("/invoice", response_model=ServiceInvoice)
async def service_invoice(
    process_id: uuid.UUID,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.service_invoice(process_id)


# ---------------------------------------------------------------------------
# PDF audit log
# ---------------------------------------------------------------------------


@pdf_router.post("/", response_model=GeneratedPdfResponse, status_code=201)
async def record_generated_pdf(
    body: GeneratedPdfCreate,
    machine: ProcessStateMachine = Depends(get_state_machine),
):
    """Append a record for a PDF rendered outside the report endpoints."""
    record = await machine.record_generated_pdf(
        body.process_id, body.pdf_type, body.file_name, body.file_path
    )
    return GeneratedPdfResponse.model_validate(record)


@pdf_router.get("/history", response_model=list[ProcessDetailResponse])
async def pdf_history(svc: ReportService = Depends(get_report_service)):
    """Processes that own at least one generated PDF."""
    items = await svc.pdf_history()
    return [ProcessDetailResponse.from_details(d) for d in items]
