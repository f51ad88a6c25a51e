"""
Health check routes for the PrepChef data layer.

These endpoints are PUBLIC (no authentication required) and read-only:
- GET /health: process is up
- GET /health/diagnostics: configuration, reachability and RLS report for
  the session the process is running with
"""

from fastapi import APIRouter, Request

from prepchef.schemas.diagnostics import DiagnosisReport
from prepchef.schemas.health import HealthResponse
from prepchef.services.database import DatabaseService
from prepchef.services.diagnostics import diagnose_connection
from prepchef.utils.logging import get_logger

logger = get_logger(__name__)

# Create router with no prefix (mounted at root level in main.py)
router = APIRouter(tags=["system"])


def get_database_service(request: Request) -> DatabaseService:
    """The DatabaseService created by the app lifespan."""
    return request.app.state.db


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "prepchef-data"
        }
    """
    logger.debug("Health check endpoint called")
    return HealthResponse()


@router.get(
    "/health/diagnostics",
    response_model=DiagnosisReport,
    summary="Connection diagnostics",
    description=(
        "Checks Supabase configuration, session, table reachability and RLS "
        "policies. Never fails: problems are listed in `errors`."
    ),
    status_code=200,
)
async def diagnostics(request: Request) -> DiagnosisReport:
    db = get_database_service(request)
    report = await diagnose_connection(db)
    if report.errors:
        logger.warning(f"Diagnostics reported {len(report.errors)} problem(s)")
    return report
