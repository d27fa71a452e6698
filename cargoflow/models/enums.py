import enum


class FlowType(str, enum.Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class VehicleType(str, enum.Enum):
    TRUCK = "truck"
    VAN = "van"
    BOX_TRUCK = "box-truck"
    TRAILER = "trailer"
    MOTORCYCLE = "motorcycle"


class ProcessStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    COMPLAINT = "complaint"


class InboundOutcome(str, enum.Enum):
    CONFIRMED = "confirmed"
    COMPLAINT = "complaint"


class PdfType(str, enum.Enum):
    WAREHOUSE = "warehouse"
    INBOUND_CONFIRMATION = "inbound_confirmation"
    TRANSPORT = "transport"
    INVOICE = "invoice"
