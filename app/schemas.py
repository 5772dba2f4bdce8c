"""Pydantic schemas for bins and the HTTP API envelopes."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


LATITUDE_RANGE_MESSAGE = "Latitude must be between -90 and 90"
LONGITUDE_RANGE_MESSAGE = "Longitude must be between -180 and 180"
STATUS_MESSAGE = "Status must be either Empty, Half-Full, or Full"


class BinStatus(str, Enum):
    """Fill levels a bin can report."""

    empty = "Empty"
    half_full = "Half-Full"
    full = "Full"


class Bin(BaseModel):
    """A stored waste bin as it appears in the table and on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Identifier assigned by the store.")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    status: BinStatus
    added_at: datetime = Field(..., alias="addedAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class BinCreate(BaseModel):
    """Fields accepted when adding a bin."""

    latitude: float
    longitude: float
    status: BinStatus

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any, info: ValidationInfo) -> Any:
        # Lax mode would otherwise turn true/false into 1.0/0.0.
        if isinstance(value, bool):
            raise ValueError(
                LATITUDE_RANGE_MESSAGE if info.field_name == "latitude" else LONGITUDE_RANGE_MESSAGE
            )
        return value

    @field_validator("latitude")
    @classmethod
    def _check_latitude(cls, value: float) -> float:
        if not -90 <= value <= 90:
            raise ValueError(LATITUDE_RANGE_MESSAGE)
        return value

    @field_validator("longitude")
    @classmethod
    def _check_longitude(cls, value: float) -> float:
        if not -180 <= value <= 180:
            raise ValueError(LONGITUDE_RANGE_MESSAGE)
        return value


class BinStatusUpdate(BaseModel):
    status: BinStatus


class BinResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Bin


class BinListResponse(BaseModel):
    success: bool = True
    count: int = Field(..., ge=0)
    data: List[Bin] = Field(default_factory=list)


class NearbyBinsResponse(BaseModel):
    """Bins within the requested radius, most recently added first."""

    success: bool = True
    count: int = Field(..., ge=0)
    radius: str = Field(..., description="Radius echoed back as '<value> km'.")
    data: List[Bin] = Field(default_factory=list)


class StatusSummaryResponse(BaseModel):
    success: bool = True
    total: int = Field(..., ge=0)
    by_status: Dict[str, int] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
