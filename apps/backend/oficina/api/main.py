"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (route guard, request context, security headers, CORS)
  - Mount auth/admin routers under /api and the portal sections at the root
  - Expose health check

Collaborators:
  - FastAPI: ASGI web framework
  - RouteGuardMiddleware: role gate for portal sections
  - RequestContextMiddleware: Request ID and logging context
  - auth_routes / admin_routes / portal_routes

Notes:
  - Middleware order matters: CORS → RequestContext → SecurityHeaders →
    RouteGuard → routes (the last added runs first)
  - The guard only inspects portal pages; /api enforces roles via Depends
  - /healthz follows Kubernetes health check convention

Production Readiness:
  - Env validation enforced at startup (via lifespan, not import time)
  - Request tracing with X-Request-Id header
  - Structured JSON logging with request correlation
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_data_store
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..identity.route_guard import RouteGuardMiddleware
from ..infrastructure.store import Tables
from .admin_routes import router as admin_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .portal_routes import router as portal_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and warms the data store."""
    settings = get_settings()

    if settings.is_production():
        settings.validate_security_requirements()

    # R: siembra las hojas de identidad antes del primer login.
    store = get_data_store()
    for table in (Tables.CLIENTS, Tables.EMPLOYEES, Tables.ADMIN):
        store.read(table)

    logger.info(
        "Oficina API iniciando",
        extra={
            "app_env": settings.app_env,
            "session_ttl_hours": settings.session_ttl_hours,
            "data_store": "file" if settings.data_store_path else "memory",
            "guard_distinct_forbidden": settings.guard_distinct_forbidden,
        },
    )

    yield

    logger.info("Oficina API deteniéndose")


def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except ValueError:
        return ["http://localhost:3000"]


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title="Oficina Console API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Login por portal (cookies de sessão)"},
            {"name": "admin", "description": "Logs, funcionários e credenciais"},
            {"name": "portal", "description": "Seções protegidas pelo route guard"},
        ],
    )

    fastapi_app.add_middleware(RouteGuardMiddleware)
    fastapi_app.add_middleware(SecurityHeadersMiddleware)
    fastapi_app.add_middleware(RequestContextMiddleware)

    try:
        cors_allow_credentials = get_settings().cors_allow_credentials
    except ValueError:
        cors_allow_credentials = False
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_allowed_origins(),
        allow_credentials=cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )

    fastapi_app.include_router(auth_router, prefix="/api")
    fastapi_app.include_router(admin_router, prefix="/api")
    fastapi_app.include_router(portal_router)

    register_exception_handlers(fastapi_app)
    return fastapi_app


app = create_app()
