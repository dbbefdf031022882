"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from membership.app.api.http.app_data import ApplicationDependencies
from membership.app.api.http.deps import get_app_dependencies
from membership.app.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; 200 while the process is running."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns 200 if the database answers, 503 otherwise. Storage and email
    are reported but do not affect readiness.
    """
    config = get_config()
    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "postgresql" if "postgresql" in config.database.url else "sqlite",
        }
        if not db_healthy:
            all_healthy = False
    except SQLAlchemyError as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    checks["storage"] = {"status": "configured", "provider": config.storage.provider}
    checks["email"] = {"status": "configured", "provider": config.email.provider}

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
