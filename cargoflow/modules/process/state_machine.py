"""Process state machine: validates and applies event transitions.

Every transition follows the same order: payload shape, process lookup,
state guard, child entity creation, process update. Guards run before any
entity is written, and the update carries the version that was read so a
concurrent change surfaces as :class:`ConflictException`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from cargoflow.exceptions import BusinessRuleException, NotFoundException
from cargoflow.models.enums import FlowType, InboundOutcome, PdfType, ProcessStatus
from cargoflow.models.generated_pdf import GeneratedPdfRecord
from cargoflow.models.process import Process
from cargoflow.modules.inventory.schemas import (
    DeliveryCreate,
    GeneratedPdfCreate,
    ProductCreate,
    TransportCreate,
)
from cargoflow.modules.inventory.validators import parse_payload
from cargoflow.modules.process.constants import (
    EVENT_REGISTERED,
    INITIAL_STATUS,
    ProcessAction,
)
from cargoflow.modules.process.schemas import (
    InboundConfirmationRequest,
    ProcessCreate,
    ProcessPatch,
)
from cargoflow.modules.process.transitions import ensure_not_terminal, validate_transition
from cargoflow.modules.stats.schemas import DashboardStats
from cargoflow.repositories.interfaces import EntityStore, ProcessRepository, ProcessWithDetails

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


class ProcessStateMachine:
    def __init__(
        self,
        entities: EntityStore,
        processes: ProcessRepository,
        *,
        strict_flow_guards: bool = True,
    ):
        self.entities = entities
        self.processes = processes
        self.strict_flow_guards = strict_flow_guards

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, process_id: uuid.UUID) -> Process:
        process = await self.processes.get_process(process_id)
        if process is None:
            raise NotFoundException(f"Process {process_id} not found")
        return process

    async def _details(self, process_id: uuid.UUID) -> ProcessWithDetails:
        details = await self.processes.get_process_with_details(process_id)
        if details is None:
            raise NotFoundException(f"Process {process_id} not found")
        return details

    def _guard(
        self,
        process: Process,
        action: ProcessAction,
        flow_type: FlowType | None = None,
    ) -> int:
        try:
            return validate_transition(process, action, flow_type)
        except BusinessRuleException as exc:
            logger.warning(
                "Rejected %s on process %s (event=%s, status=%s): %s",
                action.value,
                process.id,
                process.current_event,
                process.status.value,
                exc.message,
            )
            raise

    def _delivery_flow(self) -> FlowType | None:
        """Table override for delivery and completion.

        With ``strict_flow_guards`` off, inbound processes are checked against
        the outbound table so they can be delivered and then completed.
        """
        return None if self.strict_flow_guards else FlowType.OUTBOUND

    async def _apply(self, process: Process, patch: ProcessPatch) -> ProcessWithDetails:
        await self.processes.update_process(
            process.id, patch, expected_version=process.version
        )
        return await self._details(process.id)

    # ------------------------------------------------------------------
    # Event 1: register
    # ------------------------------------------------------------------

    async def register_product(self, payload: ProductCreate | Payload) -> ProcessWithDetails:
        """Create the product and its process at event 1."""
        data = parse_payload(ProductCreate, payload, message="Invalid product")
        product = await self.entities.create_product(data)
        process = await self.processes.create_process(
            ProcessCreate(
                product_id=product.id,
                process_type=product.flow_type,
                status=INITIAL_STATUS,
                current_event=EVENT_REGISTERED,
            )
        )
        logger.info(
            "Registered product %s with %s process %s",
            product.id,
            process.process_type.value,
            process.id,
        )
        return await self._details(process.id)

    # ------------------------------------------------------------------
    # Event 3: transport (both flows skip event 2)
    # ------------------------------------------------------------------

    async def submit_transport(
        self, process_id: uuid.UUID, payload: TransportCreate | Payload
    ) -> ProcessWithDetails:
        data = parse_payload(TransportCreate, payload, message="Invalid transport")
        process = await self._load(process_id)
        to_event = self._guard(process, ProcessAction.SUBMIT_TRANSPORT)

        transport = await self.entities.create_transport(data)
        details = await self._apply(
            process,
            ProcessPatch(
                transport_id=transport.id,
                current_event=to_event,
                status=ProcessStatus.IN_PROGRESS,
            ),
        )
        logger.info("Process %s: transport %s recorded, event %s", process_id, transport.id, to_event)
        return details

    # ------------------------------------------------------------------
    # Event 4: delivery (outbound)
    # ------------------------------------------------------------------

    async def submit_delivery(
        self, process_id: uuid.UUID, payload: DeliveryCreate | Payload
    ) -> ProcessWithDetails:
        """Attach delivery details and move an outbound process to event 4."""
        data = parse_payload(DeliveryCreate, payload, message="Invalid delivery")
        process = await self._load(process_id)
        to_event = self._guard(process, ProcessAction.SUBMIT_DELIVERY, self._delivery_flow())

        delivery = await self.entities.create_delivery(data)
        details = await self._apply(
            process,
            ProcessPatch(
                delivery_id=delivery.id,
                current_event=to_event,
                status=ProcessStatus.IN_PROGRESS,
            ),
        )
        logger.info("Process %s: delivery %s recorded, event %s", process_id, delivery.id, to_event)
        return details

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    async def complete_inbound_confirmation(
        self, process_id: uuid.UUID, payload: InboundConfirmationRequest | Payload
    ) -> ProcessWithDetails:
        """Close an inbound process as confirmed or as a complaint."""
        data = parse_payload(InboundConfirmationRequest, payload, message="Invalid confirmation")
        process = await self._load(process_id)
        self._guard(process, ProcessAction.CONFIRM_INBOUND)

        if data.action == InboundOutcome.CONFIRMED:
            patch = ProcessPatch(
                event3_status=InboundOutcome.CONFIRMED,
                status=ProcessStatus.COMPLETED,
                confirmed_at=datetime.now(UTC),
            )
        else:
            patch = ProcessPatch(
                event3_status=InboundOutcome.COMPLAINT,
                status=ProcessStatus.COMPLAINT,
                complaint_notes=data.notes,
            )

        details = await self._apply(process, patch)
        logger.info("Process %s closed as %s", process_id, data.action.value)
        return details

    async def complete_process(self, process_id: uuid.UUID) -> ProcessWithDetails:
        process = await self._load(process_id)
        self._guard(process, ProcessAction.COMPLETE, self._delivery_flow())
        details = await self._apply(process, ProcessPatch(status=ProcessStatus.COMPLETED))
        logger.info("Process %s completed", process_id)
        return details

    # ------------------------------------------------------------------
    # Pause / resume (status only)
    # ------------------------------------------------------------------

    async def pause_process(self, process_id: uuid.UUID) -> ProcessWithDetails:
        """Pause at the current event.

        Refused once the process is completed or under complaint, so a closed
        process cannot be reopened; pausing a paused process is a no-op.
        """
        process = await self._load(process_id)
        ensure_not_terminal(process)
        if process.status == ProcessStatus.PAUSED:
            return await self._details(process_id)
        details = await self._apply(process, ProcessPatch(status=ProcessStatus.PAUSED))
        logger.info("Process %s paused at event %s", process_id, process.current_event)
        return details

    async def resume_process(self, process_id: uuid.UUID) -> ProcessWithDetails:
        """Resume at the current event; same terminal rule as :meth:`pause_process`."""
        process = await self._load(process_id)
        ensure_not_terminal(process)
        if process.status == ProcessStatus.IN_PROGRESS:
            return await self._details(process_id)
        details = await self._apply(process, ProcessPatch(status=ProcessStatus.IN_PROGRESS))
        logger.info("Process %s resumed at event %s", process_id, process.current_event)
        return details

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_process(self, process_id: uuid.UUID) -> ProcessWithDetails | None:
        return await self.processes.get_process_with_details(process_id)

    async def list_processes(self) -> list[ProcessWithDetails]:
        return await self.processes.get_all_processes_with_details()

    async def list_active_processes(self) -> list[ProcessWithDetails]:
        return await self.processes.get_active_processes()

    async def get_stats(self) -> DashboardStats:
        return await self.processes.get_stats()

    # ------------------------------------------------------------------
    # PDF audit log
    # ------------------------------------------------------------------

    async def record_generated_pdf(
        self,
        process_id: uuid.UUID,
        pdf_type: PdfType | str,
        file_name: str,
        file_path: str | None = None,
    ) -> GeneratedPdfRecord:
        data = parse_payload(
            GeneratedPdfCreate,
            {
                "process_id": process_id,
                "pdf_type": pdf_type,
                "file_name": file_name,
                "file_path": file_path,
            },
            message="Invalid PDF record",
        )
        await self._load(data.process_id)
        record = await self.entities.create_generated_pdf(data)
        logger.info(
            "Recorded %s PDF %s for process %s", data.pdf_type.value, data.file_name, process_id
        )
        return record
