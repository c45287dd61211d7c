# This file defines response schemas for the liveness, readiness, and version endpoints.
# Every payload carries the API version label and request id so health checks can be traced.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class VersionedResponse(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    timestamp: datetime


class HealthResponse(VersionedResponse):
    status: str
    environment: str
    service_name: str


class ReadinessResponse(VersionedResponse):
    db_connected: bool
    db_connected_at_startup: bool
    books_table_ready: bool
    ready: bool
    database: str


class VersionResponse(VersionedResponse):
    api_version_path: str
    app_version: str
    git_commit: str | None = None
    project: str
