"""FastAPI application: REST API, health checks and metrics."""

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from taskboard import __version__
from taskboard.api.errors import register_exception_handlers
from taskboard.api.routes import auth, tasks, users
from taskboard.config import Settings, get_settings
from taskboard.core.auth_service import AuthService
from taskboard.core.comment_service import CommentService
from taskboard.core.task_service import TaskService
from taskboard.core.user_service import UserService
from taskboard.security import PasswordHasher, TokenService
from taskboard.storage import CommentRepository, Database, TaskRepository, UserRepository
from taskboard.utils.logging import get_logger
from taskboard.utils.metrics import get_metrics

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
REQUEST_ID_HEADER = "X-Request-ID"


def _wire_services(app: FastAPI, settings: Settings, database: Database) -> None:
    user_repo = UserRepository(database)
    task_repo = TaskRepository(database)
    comment_repo = CommentRepository(database)

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_service = TokenService(
        secret=settings.jwt_secret_key.get_secret_value(),
        expiration_minutes=settings.jwt_expiration_minutes,
    )
    user_service = UserService(user_repo, hasher)

    app.state.settings = settings
    app.state.database = database
    app.state.token_service = token_service
    app.state.user_service = user_service
    app.state.auth_service = AuthService(user_service, hasher, token_service)
    app.state.task_service = TaskService(task_repo, user_repo)
    app.state.comment_service = CommentService(comment_repo, task_repo, user_repo)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings (defaults to the cached global settings)
        database: Database handle (defaults to one at ``settings.database_path``)

    Returns:
        FastAPI application
    """
    settings = settings or get_settings()
    database = database or Database(settings.resolved_database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await database.initialize()
        if settings.uses_default_secret:
            logger.warning("jwt_default_secret_in_use")
        logger.info("http_server_started", version=__version__)
        try:
            yield
        finally:
            await database.close()
            logger.info("http_server_stopped")

    app = FastAPI(
        title="Taskboard",
        description="Task management REST API",
        version=__version__,
        docs_url=f"{API_PREFIX}/swagger-ui",
        openapi_url=f"{API_PREFIX}/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    _wire_services(app, settings, database)
    register_exception_handlers(app)

    @app.middleware("http")
    async def request_context(request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        route = request.scope.get("route")
        if settings.metrics_enabled:
            get_metrics().record_http_request(
                method=request.method,
                route=getattr(route, "path", "unmatched"),
                status=response.status_code,
                duration=duration,
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug("http_request_completed", status=response.status_code, duration=round(duration, 4))
        return response

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(auth.router)
    api.include_router(tasks.router)
    api.include_router(users.router)
    app.include_router(api)

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        """Liveness check endpoint.

        Returns 200 if the service is running.
        """
        return JSONResponse(
            content={"status": "ok", "service": "taskboard"},
            status_code=200,
        )

    @app.get("/health/ready", include_in_schema=False)
    async def readiness() -> JSONResponse:
        """Readiness check endpoint.

        Verifies the database answers queries.
        """
        checks = {"database": await database.health_check()}
        all_healthy = all(checks.values())

        return JSONResponse(
            content={
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
            status_code=200 if all_healthy else 503,
        )

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint.

        Returns metrics in Prometheus exposition format.
        """
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app
