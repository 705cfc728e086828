"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory.core.config import settings
from inventory.core.database import check_db_connected, get_db
from inventory.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, server time and database connectivity.
    Used by load balancers and monitoring; no authentication required.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        message="Inventory App Backend is running",
        timestamp=datetime.now(UTC),
        environment=settings.APP_ENV,
        database=db_status,
    )
