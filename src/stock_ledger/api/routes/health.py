"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends

from stock_ledger.api.dependencies import get_app_settings, get_db_pool
from stock_ledger.application.dto.responses import HealthResponse
from stock_ledger.config import Settings
from stock_ledger.infrastructure.storage.sqlite import ConnectionPool

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    pool: ConnectionPool = Depends(get_db_pool),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Service and database health.

    Reports "unhealthy" rather than failing when SQLite is unreachable.
    """
    reachable = await pool.ping()
    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=settings.app_version,
        database="ok" if reachable else "unreachable",
    )
