"""In-memory entity store and process repository.

Records live in insertion-ordered dicts keyed by UUID. Each method runs to
completion without yielding to the event loop, so a single call is atomic
with respect to other coroutines.
"""

from __future__ import annotations

import logging
import uuid

from cargoflow.database.base import utcnow
from cargoflow.exceptions import ConflictException, NotFoundException, ReferenceException
from cargoflow.models.delivery import Delivery
from cargoflow.models.generated_pdf import GeneratedPdfRecord
from cargoflow.models.process import Process
from cargoflow.models.product import Product
from cargoflow.models.transport import Transport
from cargoflow.modules.inventory.schemas import (
    DeliveryCreate,
    DeliveryPatch,
    GeneratedPdfCreate,
    ProductCreate,
    TransportCreate,
    TransportPatch,
)
from cargoflow.modules.process.constants import ACTIVE_STATUSES
from cargoflow.modules.process.schemas import ProcessCreate, ProcessPatch
from cargoflow.modules.stats.aggregator import compute_stats
from cargoflow.modules.stats.schemas import DashboardStats
from cargoflow.repositories.interfaces import ProcessWithDetails

logger = logging.getLogger(__name__)


class InMemoryEntityStore:
    def __init__(self) -> None:
        self.products: dict[uuid.UUID, Product] = {}
        self.transports: dict[uuid.UUID, Transport] = {}
        self.deliveries: dict[uuid.UUID, Delivery] = {}
        self.pdf_records: dict[uuid.UUID, GeneratedPdfRecord] = {}

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(self, data: ProductCreate) -> Product:
        product = Product(
            id=uuid.uuid4(),
            name=data.name,
            dimensions=data.dimensions.model_dump(),
            weight=data.weight,
            regulations=data.regulations.model_dump(),
            flow_type=data.flow_type,
            created_at=utcnow(),
        )
        self.products[product.id] = product
        return product

    async def get_product(self, product_id: uuid.UUID) -> Product | None:
        return self.products.get(product_id)

    async def list_products(self) -> list[Product]:
        return list(self.products.values())

    async def count_products(self) -> int:
        return len(self.products)

    # ------------------------------------------------------------------
    # Transports
    # ------------------------------------------------------------------

    async def create_transport(self, data: TransportCreate) -> Transport:
        transport = Transport(
            id=uuid.uuid4(),
            driver_name=data.driver_name,
            license_number=data.license_number,
            vehicle_type=data.vehicle_type,
            vehicle_plate=data.vehicle_plate,
            driver_photo=data.driver_photo or None,
            notes=data.notes or None,
            created_at=utcnow(),
        )
        self.transports[transport.id] = transport
        return transport

    async def get_transport(self, transport_id: uuid.UUID) -> Transport | None:
        return self.transports.get(transport_id)

    async def update_transport(
        self, transport_id: uuid.UUID, patch: TransportPatch
    ) -> Transport | None:
        transport = self.transports.get(transport_id)
        if transport is None:
            return None
        for name, value in patch.model_dump(exclude_unset=True).items():
            setattr(transport, name, value)
        return transport

    # ------------------------------------------------------------------
    # Deliveries
    # ------------------------------------------------------------------

    async def create_delivery(self, data: DeliveryCreate) -> Delivery:
        delivery = Delivery(
            id=uuid.uuid4(),
            origin_place=data.origin_place,
            destination_place=data.destination_place,
            departure_time=data.departure_time,
            delivery_notes=data.delivery_notes or None,
            completed_at=utcnow(),
        )
        self.deliveries[delivery.id] = delivery
        return delivery

    async def get_delivery(self, delivery_id: uuid.UUID) -> Delivery | None:
        return self.deliveries.get(delivery_id)

    async def update_delivery(
        self, delivery_id: uuid.UUID, patch: DeliveryPatch
    ) -> Delivery | None:
        delivery = self.deliveries.get(delivery_id)
        if delivery is None:
            return None
        for name, value in patch.model_dump(exclude_unset=True).items():
            setattr(delivery, name, value)
        return delivery

    # ------------------------------------------------------------------
    # Generated PDF records (append-only)
    # ------------------------------------------------------------------

    async def create_generated_pdf(self, data: GeneratedPdfCreate) -> GeneratedPdfRecord:
        record = GeneratedPdfRecord(
            id=uuid.uuid4(),
            process_id=data.process_id,
            pdf_type=data.pdf_type,
            file_name=data.file_name,
            file_path=data.file_path,
            generated_at=utcnow(),
        )
        self.pdf_records[record.id] = record
        return record

    async def list_generated_pdfs(self, process_id: uuid.UUID) -> list[GeneratedPdfRecord]:
        return [r for r in self.pdf_records.values() if r.process_id == process_id]


class InMemoryProcessRepository:
    def __init__(self, entities: InMemoryEntityStore) -> None:
        self.entities = entities
        self.processes: dict[uuid.UUID, Process] = {}

    async def create_process(self, data: ProcessCreate) -> Process:
        if data.product_id not in self.entities.products:
            raise ReferenceException(
                f"Product {data.product_id} does not exist",
                details=[{"field": "productId", "message": "Unknown product"}],
            )
        now = utcnow()
        process = Process(
            id=uuid.uuid4(),
            product_id=data.product_id,
            transport_id=None,
            delivery_id=None,
            current_event=data.current_event,
            status=data.status,
            process_type=data.process_type,
            event3_status=None,
            complaint_notes=None,
            confirmed_at=None,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self.processes[process.id] = process
        return process

    async def get_process(self, process_id: uuid.UUID) -> Process | None:
        return self.processes.get(process_id)

    async def update_process(
        self,
        process_id: uuid.UUID,
        patch: ProcessPatch,
        expected_version: int | None = None,
    ) -> Process:
        process = self.processes.get(process_id)
        if process is None:
            raise NotFoundException(f"Process {process_id} not found")
        if expected_version is not None and process.version != expected_version:
            logger.warning(
                "Version conflict on process %s: expected %s, found %s",
                process_id,
                expected_version,
                process.version,
            )
            raise ConflictException(
                f"Process {process_id} was modified concurrently "
                f"(expected version {expected_version}, found {process.version})"
            )

        for name, value in patch.model_dump(exclude_unset=True).items():
            setattr(process, name, value)
        process.version += 1
        process.updated_at = utcnow()
        return process

    def _compose(self, process: Process) -> ProcessWithDetails | None:
        product = self.entities.products.get(process.product_id)
        if product is None:
            return None
        return ProcessWithDetails(
            process=process,
            product=product,
            transport=(
                self.entities.transports.get(process.transport_id)
                if process.transport_id is not None
                else None
            ),
            delivery=(
                self.entities.deliveries.get(process.delivery_id)
                if process.delivery_id is not None
                else None
            ),
            pdfs=[
                r for r in self.entities.pdf_records.values() if r.process_id == process.id
            ],
        )

    async def get_process_with_details(
        self, process_id: uuid.UUID
    ) -> ProcessWithDetails | None:
        process = self.processes.get(process_id)
        if process is None:
            return None
        return self._compose(process)

    async def get_all_processes_with_details(self) -> list[ProcessWithDetails]:
        composed = (self._compose(p) for p in self.processes.values())
        return [details for details in composed if details is not None]

    async def get_active_processes(self) -> list[ProcessWithDetails]:
        composed = (
            self._compose(p) for p in self.processes.values() if p.status in ACTIVE_STATUSES
        )
        return [details for details in composed if details is not None]

    async def get_stats(self) -> DashboardStats:
        return compute_stats(self.processes.values(), total_products=len(self.entities.products))
