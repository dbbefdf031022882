"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from membership.app.api.http.app_data import ApplicationDependencies
from membership.app.api.http.middleware.limiter import (
    close_rate_limiter,
    configure_rate_limiter,
)
from membership.app.api.http.routers.health import router as health_router
from membership.app.api.http.routers.referrer import router as referrer_router
from membership.app.api.http.routers.user import router as user_router
from membership.app.api.utils.app_startup import configure_logging
from membership.app.core.errors import MembershipError
from membership.app.core.services import (
    DbSessionService,
    EmailService,
    EmailTemplates,
    JwtGeneratorService,
    JwtVerificationService,
)
from membership.app.core.services.database.db_manage import DbManageService
from membership.app.core.storage import get_blob_storage
from membership.app.runtime.config.config_data import ConfigData
from membership.app.runtime.context import get_config

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Wire the process-wide services from configuration."""
    return ApplicationDependencies(
        database_service=DbSessionService(config),
        jwt_generation_service=JwtGeneratorService(),
        jwt_verify_service=JwtVerificationService(),
        email_service=EmailService(config.email, config.site),
        email_templates=EmailTemplates(config.site.name),
        blob_storage=get_blob_storage(config.storage),
    )


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Membership Registry API",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

# expose startup for tests
__all__ = ["app", "build_dependencies", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and (
    "*" in get_config().app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Domain error rendering ---
@app.exception_handler(MembershipError)
async def membership_error_handler(request: Request, exc: MembershipError) -> JSONResponse:
    log = logger.bind(
        status_code=exc.status_code,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    if exc.status_code >= 500:
        log.opt(exception=exc).error("request.failed: {err}", err=exc.message)
    else:
        log.warning("request.rejected: {err}", err=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "err": exc.message},
    )


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except HTTPException as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=exc.status_code,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail, "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        except RequestValidationError as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=422,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.validation_error")
            return JSONResponse(
                status_code=422,
                content={"detail": exc.errors(), "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"status": "error", "err": "Internal Server Error"},
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(user_router, prefix="/api/v1")
app.include_router(referrer_router, prefix="/api/v1")
app.include_router(health_router)


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = build_dependencies(config)

    if config.app.environment != "production":
        deps: ApplicationDependencies = app.state.app_dependencies
        DbManageService(deps.database_service.engine).create_all()

    configure_rate_limiter()


async def shutdown() -> None:
    logger.info("Shutting down application")
    await close_rate_limiter()
