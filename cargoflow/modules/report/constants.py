"""Report titles, display labels, billing rates and file naming."""

from __future__ import annotations

from decimal import Decimal

from cargoflow.models.enums import FlowType

# ---------------------------------------------------------------------------
# Display formats (rendered in settings.report_timezone)
# ---------------------------------------------------------------------------

DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y, %H:%M:%S"

# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

TITLE_WAREHOUSE = "Warehouse Report"
TITLE_ENTRY = "Warehouse Entry Report"
TITLE_TRANSPORT = "Transport Report"
TITLE_TRANSPORT_INVOICE = "Transport Invoice"
TITLE_SERVICE_INVOICE = "Logistics Services Invoice"

# ---------------------------------------------------------------------------
# Regulation labels, in display order
# ---------------------------------------------------------------------------

REGULATION_LABELS: dict[str, str] = {
    "fragile": "Fragile",
    "lithium": "Lithium battery",
    "hazardous": "Hazardous",
    "refrigerated": "Refrigerated",
    "valuable": "Valuable",
    "oversized": "Oversized",
}

# Same flags phrased as billable handling on the service invoice
INVOICE_REGULATION_LABELS: dict[str, str] = {
    "fragile": "Fragile handling",
    "lithium": "Lithium battery transport",
    "hazardous": "Hazardous material",
    "refrigerated": "Cold chain",
    "valuable": "Additional insurance",
    "oversized": "Oversized cargo",
}

NO_REMARKS = "No remarks"
NO_SPECIAL_REMARKS = "No special remarks"
TRANSPORT_INVOICE_DEFAULT_NOTE = "Transport service completed satisfactorily"

# ---------------------------------------------------------------------------
# Billing (whole currency units)
# ---------------------------------------------------------------------------

VAT_RATE = Decimal("0.19")

TRANSPORT_BASE_RATE = Decimal("50000")
TRANSPORT_RATE_PER_KG = Decimal("5000")
TRANSPORT_INVOICE_DUE_DAYS = 30
TRANSPORT_SERVICE_DESCRIPTION = "Freight transport service"

HANDLING_SERVICE: dict[FlowType, tuple[str, Decimal]] = {
    FlowType.INBOUND: ("Warehouse reception", Decimal("25000")),
    FlowType.OUTBOUND: ("Shipment preparation", Decimal("25000")),
}
TRANSPORT_SERVICE: tuple[str, Decimal] = ("Transport service", Decimal("35000"))
DELIVERY_SERVICE: tuple[str, Decimal] = ("Delivery to destination", Decimal("15000"))

TRANSPORT_INVOICE_PREFIX = "FAC"
SERVICE_INVOICE_PREFIX = "INV"

# ---------------------------------------------------------------------------
# Parties on the transport invoice
# ---------------------------------------------------------------------------

CARRIER_COMPANY: dict[str, str] = {
    "name": "Transportes Rápidos Express S.A.",
    "rut": "76.543.210-K",
    "address": "Av. Logística 1234, Santiago",
    "phone": "+56 2 2345 6789",
    "email": "facturacion@transportesrapidos.cl",
}

CLIENT_COMPANY: dict[str, str] = {
    "name": "Cargo Fast",
    "rut": "12.345.678-9",
    "address": "Av. Industrial 5678, Santiago",
    "phone": "+56 2 9876 5432",
    "email": "admin@cargofast.cl",
}

# ---------------------------------------------------------------------------
# Audit-log file names
# ---------------------------------------------------------------------------

FILE_WAREHOUSE = "warehouse-process-{process_id}.pdf"
FILE_ENTRY = "entry-process-{process_id}.pdf"
FILE_TRANSPORT = "transport-process-{process_id}.pdf"
FILE_TRANSPORT_INVOICE = "transport-invoice-{process_id}.pdf"
FILE_SERVICE_INVOICE = "invoice-process-{process_id}.pdf"
