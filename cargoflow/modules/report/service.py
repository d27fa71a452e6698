"""Report projections over the composed process view.

Each report loads ``ProcessWithDetails``, builds its projection and then
appends one GeneratedPdfRecord. A failure to record propagates to the
caller; the projection is only returned once the audit entry exists.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from cargoflow.exceptions import BusinessRuleException, NotFoundException
from cargoflow.models.delivery import Delivery
from cargoflow.models.enums import FlowType, PdfType
from cargoflow.models.product import Product
from cargoflow.models.transport import Transport
from cargoflow.modules.inventory.schemas import (
    DeliveryResponse,
    GeneratedPdfCreate,
    TransportResponse,
)
from cargoflow.modules.report.constants import (
    CARRIER_COMPANY,
    CLIENT_COMPANY,
    DATE_FORMAT,
    DATETIME_FORMAT,
    DELIVERY_SERVICE,
    FILE_ENTRY,
    FILE_SERVICE_INVOICE,
    FILE_TRANSPORT,
    FILE_TRANSPORT_INVOICE,
    FILE_WAREHOUSE,
    HANDLING_SERVICE,
    INVOICE_REGULATION_LABELS,
    NO_REMARKS,
    NO_SPECIAL_REMARKS,
    REGULATION_LABELS,
    SERVICE_INVOICE_PREFIX,
    TITLE_ENTRY,
    TITLE_SERVICE_INVOICE,
    TITLE_TRANSPORT,
    TITLE_TRANSPORT_INVOICE,
    TITLE_WAREHOUSE,
    TRANSPORT_BASE_RATE,
    TRANSPORT_INVOICE_DEFAULT_NOTE,
    TRANSPORT_INVOICE_DUE_DAYS,
    TRANSPORT_INVOICE_PREFIX,
    TRANSPORT_RATE_PER_KG,
    TRANSPORT_SERVICE,
    TRANSPORT_SERVICE_DESCRIPTION,
    VAT_RATE,
)
from cargoflow.modules.report.schemas import (
    BillingTotals,
    CompanyInfo,
    DeliverySection,
    EntryReport,
    InvoiceLine,
    ProductSection,
    RouteSection,
    ServiceInvoice,
    TransportInvoice,
    TransportReport,
    TransportSection,
    TransportServiceDetails,
    WarehouseReport,
)
from cargoflow.repositories.interfaces import EntityStore, ProcessRepository, ProcessWithDetails

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_weight(grams: int) -> str:
    """``1500`` -> ``"1.5 kg"``."""
    return f"{Decimal(grams) / 1000} kg"


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_dimensions(dimensions: Mapping[str, float]) -> str:
    return (
        f"{_number(dimensions['length'])}x{_number(dimensions['width'])}"
        f"x{_number(dimensions['height'])} cm"
    )


def regulation_labels(
    regulations: Mapping[str, bool], labels: Mapping[str, str] = REGULATION_LABELS
) -> list[str]:
    return [label for flag, label in labels.items() if regulations.get(flag)]


def vehicle_label(transport: Transport, upper: bool = False) -> str:
    vehicle_type = transport.vehicle_type.value
    return f"{vehicle_type.upper() if upper else vehicle_type} - {transport.vehicle_plate}"


def vat(amount: Decimal) -> Decimal:
    """VAT rounded half-up to whole currency units."""
    return (amount * VAT_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def invoice_number(prefix: str, process_id: uuid.UUID) -> str:
    return f"{prefix}-{process_id.hex[:8].upper()}"


class ReportService:
    def __init__(
        self,
        entities: EntityStore,
        processes: ProcessRepository,
        *,
        timezone: str = "UTC",
    ):
        self.entities = entities
        self.processes = processes
        self.tz = ZoneInfo(timezone)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    def _date(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime(DATE_FORMAT)

    def _datetime(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime(DATETIME_FORMAT)

    async def _load(self, process_id: uuid.UUID) -> ProcessWithDetails:
        details = await self.processes.get_process_with_details(process_id)
        if details is None:
            raise NotFoundException(f"Process {process_id} not found")
        return details

    async def _record(self, process_id: uuid.UUID, pdf_type: PdfType, file_name: str) -> None:
        await self.entities.create_generated_pdf(
            GeneratedPdfCreate(process_id=process_id, pdf_type=pdf_type, file_name=file_name)
        )
        logger.info("Generated %s report %s for process %s", pdf_type.value, file_name, process_id)

    def _product_section(
        self,
        product: Product,
        labels: Mapping[str, str] | None = REGULATION_LABELS,
    ) -> ProductSection:
        return ProductSection(
            name=product.name,
            weight=format_weight(product.weight),
            dimensions=format_dimensions(product.dimensions),
            regulations=regulation_labels(product.regulations, labels) if labels else [],
        )

    def _transport_section(self, transport: Transport, upper: bool = False) -> TransportSection:
        return TransportSection(
            driver=transport.driver_name,
            license=transport.license_number,
            vehicle=vehicle_label(transport, upper=upper),
            notes=transport.notes or (NO_SPECIAL_REMARKS if upper else NO_REMARKS),
        )

    def _delivery_section(self, delivery: Delivery) -> DeliverySection:
        return DeliverySection(
            origin=delivery.origin_place,
            destination=delivery.destination_place,
            departure_time=self._datetime(delivery.departure_time),
            notes=delivery.delivery_notes or NO_REMARKS,
        )

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def warehouse_report(self, process_id: uuid.UUID) -> WarehouseReport:
        details = await self._load(process_id)
        process = details.process
        report = WarehouseReport(
            title=TITLE_WAREHOUSE,
            process_id=process.id,
            process_type=process.process_type.value.upper(),
            date=self._date(self._now()),
            product=self._product_section(details.product),
            transport=(
                self._transport_section(details.transport) if details.transport else None
            ),
            delivery=self._delivery_section(details.delivery) if details.delivery else None,
            status=process.status,
            current_event=process.current_event,
            created_at=self._datetime(process.created_at),
        )
        await self._record(
            process.id, PdfType.WAREHOUSE, FILE_WAREHOUSE.format(process_id=process.id)
        )
        return report

    async def entry_report(self, process_id: uuid.UUID) -> EntryReport:
        """Reception report; only inbound processes have one."""
        details = await self._load(process_id)
        process = details.process
        if process.process_type != FlowType.INBOUND:
            raise BusinessRuleException(
                f"Process {process.id} is '{process.process_type.value}'; "
                "the entry report is only for inbound processes"
            )

        report = EntryReport(
            title=TITLE_ENTRY,
            process_id=process.id,
            process_type=FlowType.INBOUND.value.upper(),
            date=self._date(self._now()),
            product=self._product_section(details.product),
            transport=(
                self._transport_section(details.transport) if details.transport else None
            ),
            status=process.status,
            event3_status=process.event3_status,
            complaint_notes=process.complaint_notes,
            confirmed_at=self._datetime(process.confirmed_at) if process.confirmed_at else None,
            created_at=self._datetime(process.created_at),
        )
        await self._record(
            process.id, PdfType.INBOUND_CONFIRMATION, FILE_ENTRY.format(process_id=process.id)
        )
        return report

    async def transport_report(self, process_id: uuid.UUID) -> TransportReport:
        details = await self._load(process_id)
        process = details.process
        route = None
        if details.delivery is not None:
            route = RouteSection(
                origin=details.delivery.origin_place,
                destination=details.delivery.destination_place,
                departure_time=self._datetime(details.delivery.departure_time),
            )

        report = TransportReport(
            title=TITLE_TRANSPORT,
            process_id=process.id,
            process_type=process.process_type.value.upper(),
            date=self._date(self._now()),
            product=self._product_section(details.product, labels=None),
            transport=(
                self._transport_section(details.transport, upper=True)
                if details.transport
                else None
            ),
            route=route,
            status=process.status,
            created_at=self._datetime(process.created_at),
        )
        await self._record(
            process.id, PdfType.TRANSPORT, FILE_TRANSPORT.format(process_id=process.id)
        )
        return report

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    async def transport_invoice(self, process_id: uuid.UUID) -> TransportInvoice:
        """Carrier invoice: base rate plus a per-kg rate, VAT on top, due in 30 days."""
        details = await self.processes.get_process_with_details(process_id)
        if details is None or details.transport is None:
            raise NotFoundException("Process or transport not found")

        process, product, transport = details.process, details.product, details.transport
        subtotal = TRANSPORT_BASE_RATE + Decimal(product.weight) * TRANSPORT_RATE_PER_KG / 1000
        tax = vat(subtotal)
        now = self._now()

        invoice = TransportInvoice(
            title=TITLE_TRANSPORT_INVOICE,
            invoice_number=invoice_number(TRANSPORT_INVOICE_PREFIX, process.id),
            date=self._date(now),
            due_date=self._date(now + timedelta(days=TRANSPORT_INVOICE_DUE_DAYS)),
            billing_company=CompanyInfo(**CARRIER_COMPANY),
            client_company=CompanyInfo(**CLIENT_COMPANY),
            service_details=TransportServiceDetails(
                description=TRANSPORT_SERVICE_DESCRIPTION,
                process_id=process.id,
                product=product.name,
                weight=format_weight(product.weight),
                driver=transport.driver_name,
                vehicle=vehicle_label(transport),
                service_date=self._date(process.created_at),
            ),
            billing=BillingTotals(subtotal=subtotal, tax=tax, total=subtotal + tax),
            notes=transport.notes or TRANSPORT_INVOICE_DEFAULT_NOTE,
        )
        await self._record(
            process.id, PdfType.INVOICE, FILE_TRANSPORT_INVOICE.format(process_id=process.id)
        )
        return invoice

    async def service_invoice(self, process_id: uuid.UUID) -> ServiceInvoice:
        """Invoice for handling, plus transport and delivery once recorded."""
        details = await self._load(process_id)
        process = details.process

        lines = [HANDLING_SERVICE[process.process_type]]
        if details.transport is not None:
            lines.append(TRANSPORT_SERVICE)
        if details.delivery is not None:
            lines.append(DELIVERY_SERVICE)
        services = [
            InvoiceLine(description=description, quantity=1, unit_price=price, total=price)
            for description, price in lines
        ]
        subtotal = sum((line.total for line in services), Decimal("0"))
        tax = vat(subtotal)

        invoice = ServiceInvoice(
            title=TITLE_SERVICE_INVOICE,
            process_id=process.id,
            process_type=process.process_type.value.upper(),
            date=self._date(self._now()),
            invoice_number=invoice_number(SERVICE_INVOICE_PREFIX, process.id),
            product=self._product_section(details.product, labels=INVOICE_REGULATION_LABELS),
            services=services,
            totals=BillingTotals(subtotal=subtotal, tax=tax, total=subtotal + tax),
            transport=(
                TransportResponse.model_validate(details.transport) if details.transport else None
            ),
            delivery=(
                DeliveryResponse.model_validate(details.delivery) if details.delivery else None
            ),
            status=process.status,
            created_at=self._datetime(process.created_at),
        )
        await self._record(
            process.id, PdfType.INVOICE, FILE_SERVICE_INVOICE.format(process_id=process.id)
        )
        return invoice

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def pdf_history(self) -> list[ProcessWithDetails]:
        """Processes that own at least one generated PDF record."""
        processes = await self.processes.get_all_processes_with_details()
        return [details for details in processes if details.pdfs]
