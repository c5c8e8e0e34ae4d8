from collections.abc import Callable

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import resolved_store_backend
from app.db.session import SessionLocal
from app.observability import log_event
from app.schemas.health import (
    HealthResponse,
    ReadinessDependency,
    ReadinessResponse,
    ReadinessStatus,
)
from app.services.store import StoreError, local_store

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", store_backend=resolved_store_backend())


@router.get(
    "/ready",
    summary="Readiness check",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
def readiness(response: Response) -> ReadinessResponse:
    if resolved_store_backend() == "db":
        dependency = ReadinessDependency(
            name="database",
            status=_database_dependency_status(SessionLocal),
        )
    else:
        dependency = ReadinessDependency(name="local_store", status=_local_store_status())

    readiness_status = "ok" if dependency.status == "ok" else "degraded"
    if readiness_status != "ok":
        log_event(f"readiness_dependency_failed:{dependency.name}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=readiness_status, dependencies=[dependency])


def _database_dependency_status(session_factory: Callable[[], Session]) -> ReadinessStatus:
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return "error"
    return "ok"


def _local_store_status() -> ReadinessStatus:
    try:
        local_store.check_writable()
    except StoreError:
        return "error"
    return "ok"
