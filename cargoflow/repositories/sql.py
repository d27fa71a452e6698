"""PostgreSQL entity store and process repository over an AsyncSession.

Both classes only ``flush``; the session owner (``get_stores``) commits or
rolls back, so a whole transition is one transaction.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

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


class SqlEntityStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(self, data: ProductCreate) -> Product:
        product = Product(
            name=data.name,
            dimensions=data.dimensions.model_dump(),
            weight=data.weight,
            regulations=data.regulations.model_dump(),
            flow_type=data.flow_type,
            created_at=utcnow(),
        )
        self.db.add(product)
        await self.db.flush()
        return product

    async def get_product(self, product_id: uuid.UUID) -> Product | None:
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def list_products(self) -> list[Product]:
        result = await self.db.execute(select(Product).order_by(Product.created_at.asc()))
        return list(result.scalars().all())

    async def count_products(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Product))
        return result.scalar() or 0

    # ------------------------------------------------------------------
    # Transports
    # ------------------------------------------------------------------

    async def create_transport(self, data: TransportCreate) -> Transport:
        transport = Transport(
            driver_name=data.driver_name,
            license_number=data.license_number,
            vehicle_type=data.vehicle_type,
            vehicle_plate=data.vehicle_plate,
            driver_photo=data.driver_photo or None,
            notes=data.notes or None,
            created_at=utcnow(),
        )
        self.db.add(transport)
        await self.db.flush()
        return transport

    async def get_transport(self, transport_id: uuid.UUID) -> Transport | None:
        result = await self.db.execute(select(Transport).where(Transport.id == transport_id))
        return result.scalar_one_or_none()

    async def update_transport(
        self, transport_id: uuid.UUID, patch: TransportPatch
    ) -> Transport | None:
        transport = await self.get_transport(transport_id)
        if transport is None:
            return None
        for name, value in patch.model_dump(exclude_unset=True).items():
            setattr(transport, name, value)
        await self.db.flush()
        return transport

    # ------------------------------------------------------------------
    # Deliveries
    # ------------------------------------------------------------------

    async def create_delivery(self, data: DeliveryCreate) -> Delivery:
        delivery = Delivery(
            origin_place=data.origin_place,
            destination_place=data.destination_place,
            departure_time=data.departure_time,
            delivery_notes=data.delivery_notes or None,
            completed_at=utcnow(),
        )
        self.db.add(delivery)
        await self.db.flush()
        return delivery

    async def get_delivery(self, delivery_id: uuid.UUID) -> Delivery | None:
        result = await self.db.execute(select(Delivery).where(Delivery.id == delivery_id))
        return result.scalar_one_or_none()

    async def update_delivery(
        self, delivery_id: uuid.UUID, patch: DeliveryPatch
    ) -> Delivery | None:
        delivery = await self.get_delivery(delivery_id)
        if delivery is None:
            return None
        for name, value in patch.model_dump(exclude_unset=True).items():
            setattr(delivery, name, value)
        await self.db.flush()
        return delivery

    # ------------------------------------------------------------------
    # Generated PDF records (append-only)
    # ------------------------------------------------------------------

    async def create_generated_pdf(self, data: GeneratedPdfCreate) -> GeneratedPdfRecord:
        record = GeneratedPdfRecord(
            process_id=data.process_id,
            pdf_type=data.pdf_type,
            file_name=data.file_name,
            file_path=data.file_path,
            generated_at=utcnow(),
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def list_generated_pdfs(self, process_id: uuid.UUID) -> list[GeneratedPdfRecord]:
        result = await self.db.execute(
            select(GeneratedPdfRecord)
            .where(GeneratedPdfRecord.process_id == process_id)
            .order_by(GeneratedPdfRecord.generated_at.asc())
        )
        return list(result.scalars().all())


class SqlProcessRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _with_details():
        return select(Process).options(
            joinedload(Process.product),
            joinedload(Process.transport),
            joinedload(Process.delivery),
            joinedload(Process.pdf_records),
        )

    @staticmethod
    def _compose(process: Process) -> ProcessWithDetails | None:
        if process.product is None:
            return None
        return ProcessWithDetails(
            process=process,
            product=process.product,
            transport=process.transport,
            delivery=process.delivery,
            pdfs=list(process.pdf_records),
        )

    async def create_process(self, data: ProcessCreate) -> Process:
        product_exists = await self.db.execute(
            select(Product.id).where(Product.id == data.product_id)
        )
        if product_exists.scalar_one_or_none() is None:
            raise ReferenceException(
                f"Product {data.product_id} does not exist",
                details=[{"field": "productId", "message": "Unknown product"}],
            )

        now = utcnow()
        process = Process(
            product_id=data.product_id,
            current_event=data.current_event,
            status=data.status,
            process_type=data.process_type,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self.db.add(process)
        await self.db.flush()
        return process

    async def get_process(self, process_id: uuid.UUID) -> Process | None:
        result = await self.db.execute(select(Process).where(Process.id == process_id))
        return result.scalar_one_or_none()

    async def update_process(
        self,
        process_id: uuid.UUID,
        patch: ProcessPatch,
        expected_version: int | None = None,
    ) -> Process:
        # Row lock: concurrent writers queue here and then see the bumped version
        result = await self.db.execute(
            select(Process)
            .where(Process.id == process_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        process = result.scalar_one_or_none()
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
        await self.db.flush()
        return process

    async def get_process_with_details(
        self, process_id: uuid.UUID
    ) -> ProcessWithDetails | None:
        result = await self.db.execute(
            self._with_details()
            .where(Process.id == process_id)
            .execution_options(populate_existing=True)
        )
        process = result.unique().scalar_one_or_none()
        if process is None:
            return None
        return self._compose(process)

    async def get_all_processes_with_details(self) -> list[ProcessWithDetails]:
        result = await self.db.execute(
            self._with_details()
            .order_by(Process.created_at.asc())
            .execution_options(populate_existing=True)
        )
        composed = (self._compose(p) for p in result.unique().scalars().all())
        return [details for details in composed if details is not None]

    async def get_active_processes(self) -> list[ProcessWithDetails]:
        result = await self.db.execute(
            self._with_details()
            .where(Process.status.in_(ACTIVE_STATUSES))
            .order_by(Process.created_at.asc())
            .execution_options(populate_existing=True)
        )
        composed = (self._compose(p) for p in result.unique().scalars().all())
        return [details for details in composed if details is not None]

    async def get_stats(self) -> DashboardStats:
        total_result = await self.db.execute(select(func.count()).select_from(Product))
        total_products = total_result.scalar() or 0
        rows = await self.db.execute(select(Process.current_event, Process.status))
        return compute_stats(rows.all(), total_products=total_products)
