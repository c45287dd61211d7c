# This file builds the FastAPI application and registers all API routers.
# Middleware attaches request IDs and timing headers, records Prometheus metrics,
# and, when enabled, appends a request log row off the event loop.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import RequestResponseEndpoint

from library_service.api.api_config import get_api_config
from library_service.api.db_access import DatabaseClient
from library_service.api.dependencies import get_database_client
from library_service.api.error_handlers import register_error_handlers
from library_service.api.routers.books import router as books_router
from library_service.api.routers.health import router as health_router
from library_service.common.ddl import apply_books_ddl, apply_request_log_ddl
from library_service.common.logging import configure_logging

LOGGER = logging.getLogger("api")

BOOK_API_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "HTTP requests handled by the book records API.",
    ["method", "path", "status_code"],
)
BOOK_API_REQUEST_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "Time spent handling a book records API request.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)
BOOK_API_INFLIGHT = Gauge(
    "api_http_inflight_requests",
    "Book records API requests currently in progress.",
    ["method", "path"],
)


async def record_request(
    db_factory: Callable[[], DatabaseClient],
    *,
    table_name: str,
    request_id: str,
    path: str,
    method: str,
    status_code: int,
    duration_ms: float,
) -> None:
    """Write the request log row on a worker thread; failures are logged, never raised."""

    try:
        db = db_factory()
        await run_in_threadpool(
            db.log_request,
            table_name=table_name,
            request_id=request_id,
            path=path,
            method=method,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception as exc:
        LOGGER.warning("Request log write failed request_id=%s: %s", request_id, exc)


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description="Create, read, replace, delete, search, and sort book records.",
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "books", "description": "Book record management."},
        ],
    )
    app.state.db_connected_at_startup = False

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        labels = {"method": request.method, "path": request.url.path}
        started = time.perf_counter()
        status_code = 500
        BOOK_API_INFLIGHT.labels(**labels).inc()
        try:
            response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0
            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                await record_request(
                    get_database_client,
                    table_name=config.request_log_table_name,
                    request_id=request_id,
                    status_code=status_code,
                    duration_ms=duration_ms,
                    **labels,
                )
            return response
        finally:
            BOOK_API_REQUESTS_TOTAL.labels(status_code=str(status_code), **labels).inc()
            BOOK_API_REQUEST_SECONDS.labels(**labels).observe(time.perf_counter() - started)
            BOOK_API_INFLIGHT.labels(**labels).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_checks() -> None:
        try:
            db = get_database_client()
            if config.create_tables_on_startup:
                apply_books_ddl(db.engine, config.books_table_name)
                if config.enable_request_logging:
                    apply_request_log_ddl(db.engine, config.request_log_table_name)
            app.state.db_connected_at_startup = db.can_connect()
        except Exception as exc:
            LOGGER.warning("Database startup check failed: %s", exc)
            app.state.db_connected_at_startup = False
        LOGGER.info("Startup database check connected=%s", app.state.db_connected_at_startup)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(books_router, prefix=config.api_version_path)

    return app


app = create_app()
