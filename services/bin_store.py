"""Validated create/read/update/delete operations on the bin table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from app.schemas import (
    LATITUDE_RANGE_MESSAGE,
    LONGITUDE_RANGE_MESSAGE,
    STATUS_MESSAGE,
    Bin,
    BinCreate,
    BinStatus,
    BinStatusUpdate,
)
from datastore.bin_table import BinTable
from services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_FIELD_LABELS = {
    "latitude": "Latitude",
    "longitude": "Longitude",
    "status": "Bin status",
}
_FIELD_MESSAGES = {
    "latitude": LATITUDE_RANGE_MESSAGE,
    "longitude": LONGITUDE_RANGE_MESSAGE,
    "status": STATUS_MESSAGE,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        location = error.get("loc") or ("payload",)
        field = str(location[0])
        if field in errors:
            continue
        if error.get("type") == "missing":
            errors[field] = f"{_FIELD_LABELS.get(field, field)} is required"
        else:
            errors[field] = _FIELD_MESSAGES.get(field, error.get("msg", "Invalid value"))
    return errors


class BinStore:
    """Every write is validated here before it reaches the table."""

    def __init__(
        self,
        table: BinTable,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.table = table
        self._clock = clock

    def create(self, payload: Mapping[str, Any], added_at: Optional[datetime] = None) -> Bin:
        try:
            fields = BinCreate.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError(_field_errors(exc)) from exc

        timestamp = added_at or self._clock()
        item = Bin(
            id=uuid4().hex,
            latitude=fields.latitude,
            longitude=fields.longitude,
            status=fields.status,
            added_at=timestamp,
            updated_at=timestamp,
        )
        self.table.put_item(item)
        logger.info(
            "Bin created",
            extra={
                "bin_id": item.id,
                "status": item.status.value,
                "latitude": item.latitude,
                "longitude": item.longitude,
            },
        )
        return item

    def get_by_id(self, bin_id: str) -> Bin:
        item = self.table.get_item(bin_id)
        if item is None:
            raise NotFoundError(bin_id)
        return item

    def update_status(self, bin_id: str, status: Union[BinStatus, str, None]) -> Bin:
        try:
            update = BinStatusUpdate.model_validate({"status": status})
        except PydanticValidationError as exc:
            raise ValidationError(_field_errors(exc)) from exc

        item = self.get_by_id(bin_id)
        updated = item.model_copy(update={"status": update.status, "updated_at": self._clock()})
        self.table.put_item(updated)
        logger.info(
            "Bin status updated",
            extra={"bin_id": bin_id, "status": update.status.value},
        )
        return updated

    def delete(self, bin_id: str) -> Bin:
        item = self.table.delete_item(bin_id)
        if item is None:
            raise NotFoundError(bin_id)
        logger.info("Bin deleted", extra={"bin_id": bin_id})
        return item

    def list_all(self, status: Optional[BinStatus] = None) -> List[Bin]:
        """Snapshot of stored bins in insertion order, optionally filtered by status."""

        snapshot = self.table.scan()
        if status is None:
            return snapshot
        return [item for item in snapshot if item.status == status]

    def count(self) -> int:
        return self.table.count()
