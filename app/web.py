from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.schemas import BinStatus
from models.queries import DEFAULT_RADIUS_KM, NearbyQuery
from services.bins import BinService, build_default_service
from services.errors import InvalidQueryError
from services.summary import summarize


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_service() -> BinService:
    return build_default_service()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius: Optional[str] = Query(None),
    service: BinService = Depends(get_service),
) -> HTMLResponse:
    query: Optional[NearbyQuery] = None
    error: Optional[str] = None

    if lat or lng:
        try:
            query = NearbyQuery.from_params(lat, lng, radius)
        except InvalidQueryError as exc:
            error = str(exc)

    if query is not None:
        bins = await service.find_nearby(query)
    else:
        bins = service.list_bins()

    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "bins": bins,
            "summary": summarize(bins),
            "statuses": [item.value for item in BinStatus],
            "query": query,
            "error": error,
            "form": {"lat": lat or "", "lng": lng or "", "radius": radius or DEFAULT_RADIUS_KM},
        },
    )
