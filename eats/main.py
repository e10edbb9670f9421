"""
FastAPI Application Entry Point

Eats Ordering API - restaurant catalog and order placement over GraphQL.

Endpoints:
    - POST /graphql: GraphQL queries and mutations
    - GET  /graphql: GraphiQL explorer (debug only)
    - GET  /: API info
    - GET  /health: System health check

Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from eats.core.config import get_settings, setup_logging
from eats.database import engine, get_db, init_db
from eats.graphql import get_context, schema
from eats.middleware import JwtMiddleware
from eats.services.notifications import get_notification_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if settings.auto_create_tables:
        await init_db()
        logger.info("✅ Database initialized")

    notifier = get_notification_service()
    logger.info(f"✅ Notification Service: {notifier.provider_name}")

    problems = settings.validate_production_config()
    if problems:
        logger.warning(f"⚠️ Insecure production config: {problems}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Restaurant catalog, dishes and order placement exposed through GraphQL.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(JwtMiddleware)

graphql_app = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if settings.debug else None,
)
app.include_router(graphql_app, prefix="/graphql")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍕 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "graphql": "/graphql",
        "health": "/health",
    }


@app.get("/health", tags=["Health"], summary="System Health Check")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Verify the database is reachable."""
    db_status = "healthy"
    try:
        await db.execute(select(text("1")))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    notifier_status = "healthy" if await get_notification_service().health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, notifier_status]
    ) else "degraded"

    return {
        "status": overall,
        "database": db_status,
        "notification_service": notifier_status,
        "timestamp": datetime.now().isoformat(),
    }


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "eats.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
