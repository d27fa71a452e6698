"""Report projections: display-ready data a PDF renderer lays out."""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import Field

from cargoflow.models.enums import InboundOutcome, ProcessStatus
from cargoflow.modules.inventory.schemas import DeliveryResponse, TransportResponse
from cargoflow.schemas.responses import CamelModel

# ---------------------------------------------------------------------------
# Shared sections
# ---------------------------------------------------------------------------


class ProductSection(CamelModel):
    name: str
    weight: str
    dimensions: str
    regulations: list[str] = Field(default_factory=list)


class TransportSection(CamelModel):
    driver: str
    license: str
    vehicle: str
    notes: str


class DeliverySection(CamelModel):
    origin: str
    destination: str
    departure_time: str
    notes: str


class RouteSection(CamelModel):
    origin: str
    destination: str
    departure_time: str


class ReportHeader(CamelModel):
    title: str
    process_id: uuid.UUID
    process_type: str
    date: str


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class WarehouseReport(ReportHeader):
    product: ProductSection
    transport: TransportSection | None = None
    delivery: DeliverySection | None = None
    status: ProcessStatus
    current_event: int
    created_at: str


class EntryReport(ReportHeader):
    product: ProductSection
    transport: TransportSection | None = None
    status: ProcessStatus
    event3_status: InboundOutcome | None = None
    complaint_notes: str | None = None
    confirmed_at: str | None = None
    created_at: str


class TransportReport(ReportHeader):
    """``transport`` and ``route`` are null until their event has been submitted."""

    product: ProductSection
    transport: TransportSection | None = None
    route: RouteSection | None = None
    status: ProcessStatus
    created_at: str


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


class CompanyInfo(CamelModel):
    name: str
    rut: str
    address: str
    phone: str
    email: str


class BillingTotals(CamelModel):
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class TransportServiceDetails(CamelModel):
    description: str
    process_id: uuid.UUID
    product: str
    weight: str
    driver: str
    vehicle: str
    service_date: str


class TransportInvoice(CamelModel):
    """Invoice the external carrier issues to us for one transport."""

    title: str
    invoice_number: str
    date: str
    due_date: str
    billing_company: CompanyInfo
    client_company: CompanyInfo
    service_details: TransportServiceDetails
    billing: BillingTotals
    notes: str


class InvoiceLine(CamelModel):
    description: str
    quantity: int = 1
    unit_price: Decimal
    total: Decimal


class ServiceInvoice(ReportHeader):
    """Invoice for the warehouse's own services on one process."""

    invoice_number: str
    product: ProductSection
    services: list[InvoiceLine]
    totals: BillingTotals
    transport: TransportResponse | None = None
    delivery: DeliveryResponse | None = None
    status: ProcessStatus
    created_at: str

