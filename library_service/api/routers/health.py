# This file defines liveness, readiness, and version endpoints for API operations.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The readiness check confirms database connectivity and that the books table is present.

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from library_service.api.api_config import ApiConfig
from library_service.api.db_access import DatabaseClient
from library_service.api.dependencies import get_config, get_database_client
from library_service.api.schemas.health_schemas import (
    HealthResponse,
    ReadinessResponse,
    VersionResponse,
)

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _git_commit() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


def _common_fields(request: Request, config: ApiConfig) -> dict[str, object]:
    return {
        "api_version": config.api_version_label(),
        "schema_version": config.schema_version,
        "request_id": request.state.request_id,
        "timestamp": _utc_now(),
    }


@router.get("/health", response_model=HealthResponse)
def health(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        **_common_fields(request, config),
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(request: Request, config: ConfigDep, db: DBDep) -> dict[str, object]:
    db_connected = db.can_connect()
    books_table_ready = db_connected and db.table_exists(config.books_table_name)

    return {
        **_common_fields(request, config),
        "db_connected": db_connected,
        "db_connected_at_startup": bool(
            getattr(request.app.state, "db_connected_at_startup", False)
        ),
        "books_table_ready": books_table_ready,
        "ready": db_connected and books_table_ready,
        "database": "reachable" if db_connected else "unreachable",
    }


@router.get("/version", response_model=VersionResponse)
def version(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        **_common_fields(request, config),
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "git_commit": _git_commit(),
        "project": config.api_name,
    }
