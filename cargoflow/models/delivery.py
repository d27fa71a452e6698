"""Delivery model: route of an outbound product."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from cargoflow.database.base import Base, UUIDPrimaryKeyMixin, utcnow


class Delivery(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "deliveries"

    origin_place: Mapped[str] = mapped_column(String(500), nullable=False)
    destination_place: Mapped[str] = mapped_column(String(500), nullable=False)
    departure_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    delivery_notes: Mapped[str | None] = mapped_column(Text)

    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=text("now()"), nullable=False
    )
