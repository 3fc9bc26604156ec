"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizbank.core.logging import get_logger
from quizbank.db.session import get_db
from quizbank.services.session_registry import registry

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "down"]
    database: Literal["ok", "down"]
    active_sessions: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    """Health check endpoint - just checks if the process is alive."""
    return HealthResponse(status="ok")


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness check")
async def readiness_check(db: Session = Depends(get_db)) -> ReadinessResponse:
    """Verify database connectivity and report live quiz sessions."""
    registry.purge_expired()
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.warning("Database readiness check failed", exc_info=True)
        database = "down"

    return ReadinessResponse(
        status="ok" if database == "ok" else "down",
        database=database,
        active_sessions=len(registry),
    )
