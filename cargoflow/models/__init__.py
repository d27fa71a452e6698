# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from cargoflow.models.delivery import Delivery
from cargoflow.models.enums import (
    FlowType,
    InboundOutcome,
    PdfType,
    ProcessStatus,
    VehicleType,
)
from cargoflow.models.generated_pdf import GeneratedPdfRecord
from cargoflow.models.process import Process
from cargoflow.models.product import Product
from cargoflow.models.transport import Transport

__all__ = [
    "Delivery",
    "FlowType",
    "GeneratedPdfRecord",
    "InboundOutcome",
    "PdfType",
    "Process",
    "ProcessStatus",
    "Product",
    "Transport",
    "VehicleType",
]
