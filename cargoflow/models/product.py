"""Product model: the goods moving through a warehouse process."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cargoflow.database.base import Base, UUIDPrimaryKeyMixin, enum_type, utcnow
from cargoflow.models.enums import FlowType


class Product(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # {"length": .., "width": .., "height": ..} in centimetres
    dimensions: Mapped[dict] = mapped_column(JSONB, nullable=False)
    weight: Mapped[int] = mapped_column(Integer, nullable=False)  # grams
    # {"fragile": bool, "lithium": bool, ...}
    regulations: Mapped[dict] = mapped_column(JSONB, nullable=False)
    flow_type: Mapped[FlowType] = mapped_column(enum_type(FlowType, "flowtype"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=text("now()"), nullable=False
    )
