"""Health check endpoint with connectivity checks for both stores."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.context import AppContext, get_context
from app.core.database import check_db_connected, get_db, get_identity_db
from app.schemas.health import HealthResponse

router = APIRouter()


def _status(db: Session) -> str:
    return "connected" if check_db_connected(db) else "disconnected"


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    identity_db: Annotated[Session, Depends(get_identity_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=ctx.settings.APP_ENV,
        database=_status(db),
        identity_database=_status(identity_db),
    )
