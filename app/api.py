"""HTTP route definitions for the service."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.schemas import (
    STATUS_MESSAGE,
    BinListResponse,
    BinResponse,
    BinStatus,
    ErrorResponse,
    NearbyBinsResponse,
    StatusSummaryResponse,
)
from models.queries import NearbyQuery
from services.bins import BinService, build_default_service
from services.errors import InvalidQueryError, NotFoundError, ValidationError
from settings import get_settings

_STARTED_AT = time.monotonic()

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}

router = APIRouter(prefix="/api/bins", tags=["bins"], responses=_ERROR_RESPONSES)
meta_router = APIRouter()


def get_service() -> BinService:
    return build_default_service()


def _parse_status(raw: Optional[str]) -> Optional[BinStatus]:
    if raw is None or not raw.strip():
        return None
    try:
        return BinStatus(raw.strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=STATUS_MESSAGE,
        ) from exc


@router.get(
    "",
    response_model=BinListResponse,
    summary="List all bins, most recently added first.",
)
async def list_bins(
    status_filter: Optional[str] = Query(None, alias="status", description="Only bins with this status."),
    service: BinService = Depends(get_service),
) -> BinListResponse:
    bins = service.list_bins(status=_parse_status(status_filter))
    return BinListResponse(count=len(bins), data=bins)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BinResponse,
    summary="Add a new bin.",
)
async def create_bin(
    payload: Dict[str, Any] = Body(..., examples=[{"latitude": 40.7128, "longitude": -74.006, "status": "Empty"}]),
    service: BinService = Depends(get_service),
) -> BinResponse:
    try:
        item = service.create_bin(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return BinResponse(message="Bin added successfully", data=item)


@router.get(
    "/nearby",
    response_model=NearbyBinsResponse,
    summary="Bins within a radius (km) of a point.",
)
async def nearby_bins(
    lat: Optional[str] = Query(None, description="Latitude of the centre point."),
    lng: Optional[str] = Query(None, description="Longitude of the centre point."),
    radius: Optional[str] = Query(None, description="Radius in kilometres, defaults to 5."),
    service: BinService = Depends(get_service),
) -> NearbyBinsResponse:
    try:
        query = NearbyQuery.from_params(lat, lng, radius)
        bins = await service.find_nearby(query)
    except InvalidQueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return NearbyBinsResponse(count=len(bins), radius=query.radius_label, data=bins)


@router.get(
    "/stats",
    response_model=StatusSummaryResponse,
    summary="Bin counts per status.",
)
async def bin_stats(service: BinService = Depends(get_service)) -> StatusSummaryResponse:
    summary = service.summary()
    return StatusSummaryResponse(total=summary.total, by_status=summary.by_status)


@router.get(
    "/{bin_id}",
    response_model=BinResponse,
    summary="Fetch a single bin.",
)
async def get_bin(
    bin_id: str,
    service: BinService = Depends(get_service),
) -> BinResponse:
    try:
        item = service.get_bin(bin_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return BinResponse(data=item)


@router.put(
    "/{bin_id}",
    response_model=BinResponse,
    summary="Update the status of a bin.",
)
async def update_bin_status(
    bin_id: str,
    payload: Dict[str, Any] = Body(..., examples=[{"status": "Full"}]),
    service: BinService = Depends(get_service),
) -> BinResponse:
    try:
        item = service.update_status(bin_id, payload.get("status"))
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return BinResponse(message="Bin status updated successfully", data=item)


@router.delete(
    "/{bin_id}",
    response_model=BinResponse,
    summary="Delete a bin.",
)
async def delete_bin(
    bin_id: str,
    service: BinService = Depends(get_service),
) -> BinResponse:
    try:
        item = service.delete_bin(bin_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return BinResponse(message="Bin deleted successfully", data=item)


@meta_router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(service: BinService = Depends(get_service)) -> dict[str, Any]:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - _STARTED_AT, 3),
        "environment": get_settings().environment,
        "bins_count": service.store.count(),
    }


@meta_router.get(
    "/",
    summary="Service description and endpoint index.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, Any]:
    return {
        "message": "Community Bin Tracker API",
        "endpoints": {
            "GET /api/bins": "List all bins (query: status)",
            "POST /api/bins": "Add a new bin",
            "GET /api/bins/nearby": "Nearby bins (query: lat, lng, radius)",
            "GET /api/bins/stats": "Bin counts per status",
            "GET /api/bins/{id}": "Fetch a bin",
            "PUT /api/bins/{id}": "Update bin status",
            "DELETE /api/bins/{id}": "Delete a bin",
            "GET /health": "Health check",
        },
    }
