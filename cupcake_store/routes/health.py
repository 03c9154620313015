"""
Cupcake Store — Health Check Route
===================================

What:  Liveness endpoint for Docker health checks and load balancers.
How:   Answers as long as the process is serving requests; it does not
       touch the database, so a probe never consumes a pooled connection.
"""

from fastapi import APIRouter

from cupcake_store.schemas.cupcake import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", message="Cupcake Store API is running!")
