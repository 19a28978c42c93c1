"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter

from stockledger import __version__
from stockledger.application.dto.responses import HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service health with a SQLite round trip.

    Reports ``degraded`` rather than failing when the database is unreachable.
    """
    from stockledger.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        latency = (time.time() - start) * 1000
    except (aiosqlite.Error, OSError) as e:
        return HealthResponse(
            status="degraded",
            version=__version__,
            uptime_seconds=time.time() - _start_time,
            database=f"unavailable: {e}",
        )

    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database="sqlite",
        database_latency_ms=round(latency, 2),
    )
