"""Pydantic v2 schemas for the process workflow API."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field, model_validator

from cargoflow.models.enums import FlowType, InboundOutcome, ProcessStatus
from cargoflow.modules.inventory.schemas import (
    DeliveryResponse,
    GeneratedPdfResponse,
    PayloadModel,
    ProductResponse,
    TransportResponse,
)
from cargoflow.modules.process.constants import FINAL_EVENT, NextStep
from cargoflow.modules.process.transitions import next_step
from cargoflow.schemas.responses import CamelModel

if TYPE_CHECKING:
    from cargoflow.repositories.interfaces import ProcessWithDetails

# ---------------------------------------------------------------------------
# Repository payloads
# ---------------------------------------------------------------------------


class ProcessCreate(CamelModel):
    """Initial process record. Every field is explicit; storage sets no defaults."""

    product_id: uuid.UUID
    process_type: FlowType
    status: ProcessStatus
    current_event: int = Field(..., ge=1, le=4)


class ProcessPatch(CamelModel):
    """Named fields a process update may touch; unset fields are left alone."""

    transport_id: uuid.UUID | None = None
    delivery_id: uuid.UUID | None = None
    current_event: int | None = Field(None, ge=1, le=4)
    status: ProcessStatus | None = None
    event3_status: InboundOutcome | None = None
    complaint_notes: str | None = None
    confirmed_at: datetime | None = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class InboundConfirmationRequest(PayloadModel):
    action: InboundOutcome
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def _complaint_requires_notes(self) -> InboundConfirmationRequest:
        if self.action == InboundOutcome.COMPLAINT and not self.notes:
            raise ValueError("notes are required when registering a complaint")
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ProcessResponse(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    transport_id: uuid.UUID | None = None
    delivery_id: uuid.UUID | None = None
    current_event: int
    status: ProcessStatus
    process_type: FlowType
    event3_status: InboundOutcome | None = None
    complaint_notes: str | None = None
    confirmed_at: datetime | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class ProcessDetailResponse(ProcessResponse):
    product: ProductResponse
    transport: TransportResponse | None = None
    delivery: DeliveryResponse | None = None
    pdfs: list[GeneratedPdfResponse] = Field(default_factory=list)
    final_event: int
    next_step: NextStep

    @classmethod
    def from_details(cls, details: ProcessWithDetails) -> ProcessDetailResponse:
        process = details.process
        return cls(
            **ProcessResponse.model_validate(process).model_dump(),
            product=ProductResponse.model_validate(details.product),
            transport=(
                TransportResponse.model_validate(details.transport)
                if details.transport is not None
                else None
            ),
            delivery=(
                DeliveryResponse.model_validate(details.delivery)
                if details.delivery is not None
                else None
            ),
            pdfs=[GeneratedPdfResponse.model_validate(pdf) for pdf in details.pdfs],
            final_event=FINAL_EVENT[process.process_type],
            next_step=next_step(process),
        )
