from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.bin_table import BinTable
from services.bin_store import BinStore
from services.bins import BinService
from services.proximity import ProximitySearch


@pytest.fixture
def service() -> Iterator[BinService]:
    bin_service = BinService(store=BinStore(table=BinTable(name="test")), search=ProximitySearch(), workers=1)
    yield bin_service
    bin_service.shutdown()


@pytest.fixture
def ui_client(service: BinService, monkeypatch) -> Iterator[TestClient]:
    def build_test_service(workers: int | None = None) -> BinService:
        return service

    build_test_service.cache_clear = lambda: None  # type: ignore[attr-defined]
    monkeypatch.setattr("app.main.build_default_service", build_test_service)
    monkeypatch.setattr("app.web.build_default_service", build_test_service)

    with TestClient(create_app()) as client:
        yield client


def _add(service: BinService, latitude: float, longitude: float, status: str) -> str:
    added_at = datetime(2024, 1, 15, tzinfo=timezone.utc)
    return service.store.create({"latitude": latitude, "longitude": longitude, "status": status}, added_at=added_at).id


def test_ui_lists_all_bins_with_counts(ui_client: TestClient, service: BinService) -> None:
    downtown = _add(service, 40.7128, -74.0060, "Empty")
    midtown = _add(service, 40.7589, -73.9851, "Full")

    response = ui_client.get("/ui")

    assert response.status_code == 200
    assert "All bins" in response.text
    assert downtown in response.text and midtown in response.text
    assert "Total: 2" in response.text


def test_ui_nearby_filter(ui_client: TestClient, service: BinService) -> None:
    downtown = _add(service, 40.7128, -74.0060, "Empty")
    midtown = _add(service, 40.7589, -73.9851, "Full")

    response = ui_client.get("/ui", params={"lat": "40.7128", "lng": "-74.0060", "radius": "1"})

    assert response.status_code == 200
    assert "Bins within 1 km" in response.text
    assert downtown in response.text
    assert midtown not in response.text


def test_ui_renders_query_errors_inline(ui_client: TestClient, service: BinService) -> None:
    _add(service, 1, 1, "Half-Full")

    response = ui_client.get("/ui", params={"lat": "95", "lng": "0"})

    assert response.status_code == 200
    assert "Latitude must be between -90 and 90" in response.text
    assert "All bins" in response.text
