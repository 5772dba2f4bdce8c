from __future__ import annotations
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from app.api import meta_router, router
from app.errors import register_exception_handlers
from app.web import router as web_router
from logging_config import configure_logging
from services.bins import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_service()
    if get_settings().seed_sample_data:
        service.seed_sample_data()
    try:
        yield
    finally:
        service.shutdown()
        build_default_service.cache_clear()


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    start_time = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Handled request",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": int((time.perf_counter() - start_time) * 1000),
        },
    )
    return response


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(
        title="Bin Tracker",
        description="Community waste-bin tracker with nearby-bin search.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)
    app.include_router(meta_router)
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
