"""Process model: one warehouse movement of one product."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cargoflow.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_type
from cargoflow.models.enums import FlowType, InboundOutcome, ProcessStatus

if TYPE_CHECKING:
    from cargoflow.models.delivery import Delivery
    from cargoflow.models.generated_pdf import GeneratedPdfRecord
    from cargoflow.models.product import Product
    from cargoflow.models.transport import Transport


class Process(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "processes"

    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    transport_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("transports.id", ondelete="RESTRICT")
    )
    delivery_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("deliveries.id", ondelete="RESTRICT")
    )

    current_event: Mapped[int] = mapped_column(Integer, nullable=False)
    # No server default: the state machine always sets the initial status
    status: Mapped[ProcessStatus] = mapped_column(
        enum_type(ProcessStatus, "processstatus"), nullable=False
    )
    process_type: Mapped[FlowType] = mapped_column(enum_type(FlowType, "flowtype"), nullable=False)

    # Inbound event 3 outcome
    event3_status: Mapped[InboundOutcome | None] = mapped_column(
        enum_type(InboundOutcome, "inboundoutcome")
    )
    complaint_notes: Mapped[str | None] = mapped_column(Text)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Optimistic concurrency counter, bumped on every update
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    # Relationships
    product: Mapped[Product] = relationship("Product", lazy="noload")
    transport: Mapped[Transport | None] = relationship("Transport", lazy="noload")
    delivery: Mapped[Delivery | None] = relationship("Delivery", lazy="noload")
    pdf_records: Mapped[list[GeneratedPdfRecord]] = relationship(
        "GeneratedPdfRecord",
        back_populates="process",
        lazy="noload",
        order_by="GeneratedPdfRecord.generated_at",
    )

    __table_args__ = (
        Index("ix_processes_status", "status"),
        Index("ix_processes_transport_id", "transport_id"),
        Index("ix_processes_delivery_id", "delivery_id"),
    )
