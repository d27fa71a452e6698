"""Transport model: driver and vehicle carrying a product."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from cargoflow.database.base import Base, UUIDPrimaryKeyMixin, enum_type, utcnow
from cargoflow.models.enums import VehicleType


class Transport(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "transports"

    driver_name: Mapped[str] = mapped_column(String(200), nullable=False)
    license_number: Mapped[str] = mapped_column(String(100), nullable=False)
    vehicle_type: Mapped[VehicleType] = mapped_column(
        enum_type(VehicleType, "vehicletype"), nullable=False
    )
    vehicle_plate: Mapped[str] = mapped_column(String(50), nullable=False)
    driver_photo: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=text("now()"), nullable=False
    )
