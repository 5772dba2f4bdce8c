"""Coordinates the bin store, nearby searches and worker resources."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Any, List, Mapping, Optional

from app.schemas import Bin, BinStatus
from datastore.bin_table import build_default_table
from models.queries import NearbyQuery
from services.bin_store import BinStore
from services.proximity import ProximitySearch
from services.sample_data import SAMPLE_BINS, sample_added_at, sample_payloads
from services.summary import StatusSummary, summarize
from settings import get_settings

logger = logging.getLogger(__name__)


def _newest_first(bins: List[Bin]) -> List[Bin]:
    return sorted(bins, key=lambda item: item.added_at, reverse=True)


class BinService:
    """Entry point used by the HTTP layer for every bin operation."""

    def __init__(
        self,
        store: BinStore,
        search: ProximitySearch,
        workers: int = 2,
        offload_threshold: int = 5000,
    ) -> None:
        self.store = store
        self.search = search
        self.offload_threshold = offload_threshold
        self.executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="nearby-search"
        )

    def list_bins(self, status: Optional[BinStatus] = None) -> List[Bin]:
        return _newest_first(self.store.list_all(status=status))

    def create_bin(self, payload: Mapping[str, Any]) -> Bin:
        return self.store.create(payload)

    def get_bin(self, bin_id: str) -> Bin:
        return self.store.get_by_id(bin_id)

    def update_status(self, bin_id: str, status: Any) -> Bin:
        return self.store.update_status(bin_id, status)

    def delete_bin(self, bin_id: str) -> Bin:
        return self.store.delete(bin_id)

    async def find_nearby(self, query: NearbyQuery) -> List[Bin]:
        """Search the current snapshot, on a worker thread once it grows large."""

        snapshot = self.store.list_all()
        if len(snapshot) < self.offload_threshold:
            return self.search.search(snapshot, query)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self.search.search, snapshot, query)

    def summary(self) -> StatusSummary:
        return summarize(self.store.list_all())

    def seed_sample_data(self) -> List[Bin]:
        """Load the sample dataset, but only into an empty table."""

        if self.store.count():
            logger.info("Skipping sample data, table already populated")
            return []
        created = [
            self.store.create(payload, added_at=sample_added_at(record))
            for payload, record in zip(sample_payloads(), SAMPLE_BINS)
        ]
        logger.info("Seeded sample bins", extra={"result_count": len(created)})
        return created

    def shutdown(self) -> None:
        """Release worker threads during application shutdown."""
        self.executor.shutdown(wait=False, cancel_futures=True)


@lru_cache
def build_default_service(workers: Optional[int] = None) -> BinService:
    """Factory that wires the service with the configured table."""
    settings = get_settings()
    store = BinStore(table=build_default_table())
    return BinService(
        store=store,
        search=ProximitySearch(),
        workers=workers or settings.search_workers,
        offload_threshold=settings.search_offload_threshold,
    )
