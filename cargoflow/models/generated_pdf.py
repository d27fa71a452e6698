"""GeneratedPdfRecord model: append-only log of generated reports."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cargoflow.database.base import Base, UUIDPrimaryKeyMixin, enum_type, utcnow
from cargoflow.models.enums import PdfType

if TYPE_CHECKING:
    from cargoflow.models.process import Process


class GeneratedPdfRecord(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "generated_pdfs"

    process_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("processes.id", ondelete="CASCADE"),
        nullable=False,
    )
    pdf_type: Mapped[PdfType] = mapped_column(enum_type(PdfType, "pdftype"), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str | None] = mapped_column(String(500))

    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=text("now()"), nullable=False
    )

    # Relationships
    process: Mapped[Process] = relationship(
        "Process", back_populates="pdf_records", lazy="noload"
    )

    __table_args__ = (
        Index("ix_generated_pdfs_process_id", "process_id"),
    )
