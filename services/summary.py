"""Per-status counts for a collection of bins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable

from app.schemas import Bin, BinStatus


@dataclass
class StatusSummary:
    """Totals for each fill level, with every status present even when zero."""

    total: int = 0
    by_status: Dict[str, int] = field(
        default_factory=lambda: {status.value: 0 for status in BinStatus}
    )


def summarize(bins: Iterable[Bin]) -> StatusSummary:
    summary = StatusSummary()
    for item in bins:
        summary.total += 1
        summary.by_status[item.status.value] += 1
    return summary
