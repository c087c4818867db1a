"""Observability API endpoints.

Provides metrics and health checks for monitoring.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.orm import Session

from ..database import get_db
from .health import check_database_health, get_overall_health, HealthStatus

router = APIRouter(tags=["Observability"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    include_in_schema=False,
)
def metrics():
    """Expose Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns health status of the database connection",
)
def health_check(db: Session = Depends(get_db)):
    """Returns 200 when all components are healthy, 503 otherwise."""
    components = {"database": check_database_health(db)}
    overall_status = get_overall_health(components)

    return JSONResponse(
        status_code=status.HTTP_200_OK if overall_status == HealthStatus.HEALTHY else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": overall_status.value,
            "components": {name: asdict(c) for name, c in components.items()},
        },
    )
