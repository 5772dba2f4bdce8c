"""Sample bins around Manhattan used to seed an empty table."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

SAMPLE_BINS: List[Dict[str, Any]] = [
    {"latitude": 40.7128, "longitude": -74.0060, "status": "Empty", "addedAt": "2024-01-15T08:30:00Z"},
    {"latitude": 40.7589, "longitude": -73.9851, "status": "Half-Full", "addedAt": "2024-01-15T09:15:00Z"},
    {"latitude": 40.7505, "longitude": -73.9934, "status": "Full", "addedAt": "2024-01-15T10:00:00Z"},
    {"latitude": 40.7614, "longitude": -73.9776, "status": "Empty", "addedAt": "2024-01-15T11:30:00Z"},
    {"latitude": 40.7282, "longitude": -73.7949, "status": "Half-Full", "addedAt": "2024-01-15T12:45:00Z"},
    {"latitude": 40.6782, "longitude": -73.9442, "status": "Full", "addedAt": "2024-01-15T13:20:00Z"},
    {"latitude": 40.7831, "longitude": -73.9712, "status": "Empty", "addedAt": "2024-01-15T14:10:00Z"},
    {"latitude": 40.7580, "longitude": -73.9855, "status": "Half-Full", "addedAt": "2024-01-15T15:00:00Z"},
    {"latitude": 40.7488, "longitude": -73.9857, "status": "Full", "addedAt": "2024-01-15T16:30:00Z"},
]


def sample_payloads() -> List[Dict[str, Any]]:
    """Create payloads without timestamps, as a client would send them."""
    return [
        {key: value for key, value in record.items() if key != "addedAt"}
        for record in SAMPLE_BINS
    ]


def sample_added_at(record: Dict[str, Any]) -> datetime:
    raw = str(record["addedAt"])
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw).astimezone(timezone.utc)
