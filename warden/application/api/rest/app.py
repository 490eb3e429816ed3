import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from warden.application.api.v1.errors import map_warden_error
from warden.application.api.v1.routes import activity_logs, health, roles, users
from warden.application.di import create_container
from warden.config import Config, configure_logging
from warden.domain.shared.authorization.policy_table import PolicyTable
from warden.domain.shared.authorization.startup import validate_all_handlers
from warden.domain.shared.error import WardenError
from warden.infrastructure.persistence.database import create_schema
from warden.infrastructure.persistence.seed import ensure_policy_roles
from warden.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    config = await container.get(Config)

    # Builds and validates the policy table before the first request
    table = await container.get(PolicyTable)

    if config.database.auto_migrate:
        engine = await container.get(AsyncEngine)
        await create_schema(engine)
        await ensure_policy_roles(engine, table)

    yield

    await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    if not config.auth.jwt.secret:
        logger.warning("WARDEN_AUTH__JWT__SECRET is not set; every request will be anonymous")

    # Every handler must declare an authorization gate (fail fast)
    validate_all_handlers()

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    if config.logging.logfire:
        logfire.configure(service_name="warden", service_version=config.server.version)
        logfire.instrument_fastapi(app_instance)

    container = create_container(config)
    setup_dishka(container, app_instance)

    app_instance.include_router(health.router, prefix="/api/v1")
    app_instance.include_router(users.router, prefix="/api/v1")
    app_instance.include_router(roles.router, prefix="/api/v1")
    app_instance.include_router(activity_logs.router, prefix="/api/v1")

    # Global Warden error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(WardenError)
    async def warden_error_handler(request: Request, exc: WardenError):
        http_exc = map_warden_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
            headers=http_exc.headers,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app_instance
