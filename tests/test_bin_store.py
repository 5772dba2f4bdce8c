from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import BinStatus
from datastore.bin_table import BinTable
from services.bin_store import BinStore
from services.errors import NotFoundError, ValidationError


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> BinStore:
    return BinStore(table=BinTable(name="bins"), clock=clock)


def test_create_assigns_id_and_timestamps(store: BinStore, clock: FakeClock) -> None:
    item = store.create({"latitude": 40.7128, "longitude": -74.006, "status": "Empty"})

    assert len(item.id) == 32
    assert item.status == BinStatus.empty
    assert item.added_at == item.updated_at == clock.now
    assert store.get_by_id(item.id) == item


def test_create_accepts_numeric_strings(store: BinStore) -> None:
    item = store.create({"latitude": "40.5", "longitude": "-73.25", "status": "Full"})

    assert item.latitude == 40.5
    assert item.longitude == -73.25


def test_create_rejects_boolean_coordinates(store: BinStore) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.create({"latitude": True, "longitude": False, "status": "Empty"})

    assert excinfo.value.errors == {
        "latitude": "Latitude must be between -90 and 90",
        "longitude": "Longitude must be between -180 and 180",
    }
    assert store.count() == 0


def test_create_honours_explicit_added_at(store: BinStore) -> None:
    added_at = datetime(2023, 6, 1, tzinfo=timezone.utc)

    item = store.create({"latitude": 1, "longitude": 2, "status": "Full"}, added_at=added_at)

    assert item.added_at == item.updated_at == added_at


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (
            {"latitude": 91, "longitude": 0, "status": "Empty"},
            {"latitude": "Latitude must be between -90 and 90"},
        ),
        (
            {"latitude": 0, "longitude": -180.5, "status": "Empty"},
            {"longitude": "Longitude must be between -180 and 180"},
        ),
        (
            {"latitude": 0, "longitude": 0, "status": "Overflowing"},
            {"status": "Status must be either Empty, Half-Full, or Full"},
        ),
        (
            {"latitude": "north", "longitude": 0, "status": "Empty"},
            {"latitude": "Latitude must be between -90 and 90"},
        ),
        (
            {},
            {
                "latitude": "Latitude is required",
                "longitude": "Longitude is required",
                "status": "Bin status is required",
            },
        ),
    ],
)
def test_create_reports_per_field_errors(store: BinStore, payload, expected) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.create(payload)

    assert excinfo.value.errors == expected
    assert str(excinfo.value) == ", ".join(expected.values())
    assert store.list_all() == []


def test_update_status_refreshes_updated_at_only(store: BinStore, clock: FakeClock) -> None:
    item = store.create({"latitude": 1, "longitude": 1, "status": "Empty"})
    clock.advance(30)

    updated = store.update_status(item.id, "Half-Full")

    assert updated.status == BinStatus.half_full
    assert updated.added_at == item.added_at
    assert updated.updated_at == clock.now
    assert store.get_by_id(item.id) == updated


def test_update_status_validates_before_lookup(store: BinStore) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.update_status("missing", "Sparkling")

    assert excinfo.value.errors == {"status": "Status must be either Empty, Half-Full, or Full"}


def test_update_status_requires_a_status(store: BinStore) -> None:
    item = store.create({"latitude": 1, "longitude": 1, "status": "Empty"})

    with pytest.raises(ValidationError):
        store.update_status(item.id, None)


def test_missing_bins_raise_not_found(store: BinStore) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        store.get_by_id("nope")
    assert excinfo.value.bin_id == "nope"
    assert str(excinfo.value) == "Bin not found"

    with pytest.raises(NotFoundError):
        store.update_status("nope", "Full")
    with pytest.raises(NotFoundError):
        store.delete("nope")


def test_delete_returns_removed_bin(store: BinStore) -> None:
    item = store.create({"latitude": 1, "longitude": 1, "status": "Empty"})

    removed = store.delete(item.id)

    assert removed == item
    assert store.count() == 0


def test_list_all_filters_by_status_in_insertion_order(store: BinStore) -> None:
    first = store.create({"latitude": 1, "longitude": 1, "status": "Full"})
    store.create({"latitude": 2, "longitude": 2, "status": "Empty"})
    third = store.create({"latitude": 3, "longitude": 3, "status": "Full"})

    assert [item.id for item in store.list_all(status=BinStatus.full)] == [first.id, third.id]
    assert len(store.list_all()) == 3


def test_writes_are_logged_with_bin_context(store: BinStore, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="services.bin_store"):
        item = store.create({"latitude": 1, "longitude": 1, "status": "Empty"})
        store.update_status(item.id, "Full")
        store.delete(item.id)

    records = [record for record in caplog.records if record.name == "services.bin_store"]
    assert [record.getMessage() for record in records] == [
        "Bin created",
        "Bin status updated",
        "Bin deleted",
    ]
    assert all(getattr(record, "bin_id", None) == item.id for record in records)
    assert getattr(records[1], "status", None) == "Full"
