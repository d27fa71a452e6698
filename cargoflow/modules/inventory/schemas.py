"""Pydantic v2 schemas for Product, Transport, Delivery and PDF records."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import ConfigDict, Field, StrictBool, field_validator

from cargoflow.models.enums import FlowType, PdfType, VehicleType
from cargoflow.schemas.responses import CamelModel


class PayloadModel(CamelModel):
    """Input schema: strips surrounding whitespace so blank strings fail ``min_length``."""

    model_config = ConfigDict(str_strip_whitespace=True)


def _assume_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _not_null(value: object) -> object:
    # Validators only run on fields the caller set; None there would clear a
    # required column.
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------


class Dimensions(CamelModel):
    length: float = Field(..., gt=0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class Regulations(CamelModel):
    fragile: StrictBool = False
    lithium: StrictBool = False
    hazardous: StrictBool = False
    refrigerated: StrictBool = False
    valuable: StrictBool = False
    oversized: StrictBool = False


class ProductCreate(PayloadModel):
    name: str = Field(..., min_length=1, max_length=255)
    dimensions: Dimensions
    weight: int = Field(..., gt=0, description="Weight in grams")
    regulations: Regulations = Field(default_factory=Regulations)
    flow_type: FlowType


class ProductResponse(CamelModel):
    id: uuid.UUID
    name: str
    dimensions: Dimensions
    weight: int
    regulations: Regulations
    flow_type: FlowType
    created_at: datetime


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportCreate(PayloadModel):
    driver_name: str = Field(..., min_length=1, max_length=200)
    license_number: str = Field(..., min_length=1, max_length=100)
    vehicle_type: VehicleType
    vehicle_plate: str = Field(..., min_length=1, max_length=50)
    driver_photo: str | None = None
    notes: str | None = Field(None, max_length=2000)


class TransportPatch(PayloadModel):
    """Named fields a transport update may touch; unset fields are left alone."""

    driver_name: str | None = Field(None, min_length=1, max_length=200)
    license_number: str | None = Field(None, min_length=1, max_length=100)
    vehicle_type: VehicleType | None = None
    vehicle_plate: str | None = Field(None, min_length=1, max_length=50)
    driver_photo: str | None = None
    notes: str | None = Field(None, max_length=2000)

    @field_validator("driver_name", "license_number", "vehicle_type", "vehicle_plate")
    @classmethod
    def _required_not_null(cls, value: object) -> object:
        return _not_null(value)


class TransportResponse(CamelModel):
    id: uuid.UUID
    driver_name: str
    license_number: str
    vehicle_type: VehicleType
    vehicle_plate: str
    driver_photo: str | None = None
    notes: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class DeliveryCreate(PayloadModel):
    origin_place: str = Field(..., min_length=1, max_length=500)
    destination_place: str = Field(..., min_length=1, max_length=500)
    departure_time: datetime
    delivery_notes: str | None = Field(None, max_length=2000)

    @field_validator("departure_time")
    @classmethod
    def _departure_time_utc(cls, value: datetime) -> datetime:
        return _assume_utc(value)


class DeliveryPatch(PayloadModel):
    """Named fields a delivery update may touch; unset fields are left alone."""

    origin_place: str | None = Field(None, min_length=1, max_length=500)
    destination_place: str | None = Field(None, min_length=1, max_length=500)
    departure_time: datetime | None = None
    delivery_notes: str | None = Field(None, max_length=2000)

    @field_validator("departure_time")
    @classmethod
    def _departure_time_utc(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value) if value is not None else None

    @field_validator("origin_place", "destination_place", "departure_time")
    @classmethod
    def _required_not_null(cls, value: object) -> object:
        return _not_null(value)


class DeliveryResponse(CamelModel):
    id: uuid.UUID
    origin_place: str
    destination_place: str
    departure_time: datetime
    delivery_notes: str | None = None
    completed_at: datetime


# ---------------------------------------------------------------------------
# Generated PDF records
# ---------------------------------------------------------------------------


class GeneratedPdfCreate(PayloadModel):
    process_id: uuid.UUID
    pdf_type: PdfType
    file_name: str = Field(..., min_length=1, max_length=255)
    file_path: str | None = Field(None, max_length=500)


class GeneratedPdfResponse(CamelModel):
    id: uuid.UUID
    process_id: uuid.UUID
    pdf_type: PdfType
    file_name: str
    file_path: str | None = None
    generated_at: datetime
