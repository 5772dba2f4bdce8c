from __future__ import annotations
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from app.schemas import Bin
from settings import get_settings

logger = logging.getLogger(__name__)


class BinTable:
    """In-memory bin documents keyed by id, optionally mirrored to a JSON file.

    Items keep insertion order; replacing an existing id keeps its position.
    """

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._items: Dict[str, Bin] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def put_item(self, item: Bin) -> None:
        with self._lock:
            self._items[item.id] = item.model_copy(deep=True)
            self._persist()

    def get_item(self, key: str) -> Optional[Bin]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def delete_item(self, key: str) -> Optional[Bin]:
        """Remove and return the item, or ``None`` when the key is unknown."""

        with self._lock:
            item = self._items.pop(key, None)
            if item is not None:
                self._persist()
            return item

    def scan(self) -> list[Bin]:
        """Return deep copies of all stored bins, taken under one lock acquisition."""

        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {
            bin_id: item.model_dump(mode="json", by_alias=True)
            for bin_id, item in self._items.items()
        }
        self.persistence_path.write_text(json.dumps(payload, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("bin table file must hold a JSON object")
        except (OSError, ValueError):
            logger.warning(
                "Ignoring unreadable bin table file",
                extra={"reason": str(self.persistence_path)},
            )
            data = {}

        for bin_id, payload in data.items():
            try:
                self._items[bin_id] = Bin.model_validate(payload)
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping invalid bin record",
                    extra={"bin_id": bin_id, "reason": f"{exc.error_count()} validation error(s)"},
                )


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> BinTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    table_path = settings.table_persistence_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return BinTable(name=table_name, persistence_path=persistence)
