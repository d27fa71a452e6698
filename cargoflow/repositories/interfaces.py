"""Storage interfaces for the entity store and the process repository.

Services depend on these protocols, never on a concrete backend. Two
implementations ship: ``memory`` (process-local maps, used by tests and the
``memory`` storage backend) and ``sql`` (PostgreSQL via SQLAlchemy).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

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
from cargoflow.modules.process.schemas import ProcessCreate, ProcessPatch
from cargoflow.modules.stats.schemas import DashboardStats


@dataclass
class ProcessWithDetails:
    """A process joined with its product, optional children and PDF records."""

    process: Process
    product: Product
    transport: Transport | None = None
    delivery: Delivery | None = None
    pdfs: list[GeneratedPdfRecord] = field(default_factory=list)


@runtime_checkable
class EntityStore(Protocol):
    """CRUD for Product, Transport, Delivery and GeneratedPdfRecord."""

    async def create_product(self, data: ProductCreate) -> Product: ...

    async def get_product(self, product_id: uuid.UUID) -> Product | None: ...

    async def list_products(self) -> list[Product]: ...

    async def count_products(self) -> int: ...

    async def create_transport(self, data: TransportCreate) -> Transport: ...

    async def get_transport(self, transport_id: uuid.UUID) -> Transport | None: ...

    async def update_transport(
        self, transport_id: uuid.UUID, patch: TransportPatch
    ) -> Transport | None: ...

    async def create_delivery(self, data: DeliveryCreate) -> Delivery: ...

    async def get_delivery(self, delivery_id: uuid.UUID) -> Delivery | None: ...

    async def update_delivery(
        self, delivery_id: uuid.UUID, patch: DeliveryPatch
    ) -> Delivery | None: ...

    async def create_generated_pdf(self, data: GeneratedPdfCreate) -> GeneratedPdfRecord: ...

    async def list_generated_pdfs(self, process_id: uuid.UUID) -> list[GeneratedPdfRecord]: ...


@runtime_checkable
class ProcessRepository(Protocol):
    """Process CRUD plus composition with the entities it references."""

    async def create_process(self, data: ProcessCreate) -> Process: ...

    async def get_process(self, process_id: uuid.UUID) -> Process | None: ...

    async def update_process(
        self,
        process_id: uuid.UUID,
        patch: ProcessPatch,
        expected_version: int | None = None,
    ) -> Process: ...

    async def get_process_with_details(
        self, process_id: uuid.UUID
    ) -> ProcessWithDetails | None: ...

    async def get_all_processes_with_details(self) -> list[ProcessWithDetails]: ...

    async def get_active_processes(self) -> list[ProcessWithDetails]: ...

    async def get_stats(self) -> DashboardStats: ...
