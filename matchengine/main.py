"""Match engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from matchengine.adapters.persistence.database import engine
from matchengine.config import settings
from matchengine.domain.errors import EngineError
from matchengine.infrastructure.api.errors import error_response
from matchengine.infrastructure.api.routes_assignments import router as assignments_router
from matchengine.infrastructure.api.routes_health import router as health_router
from matchengine.infrastructure.api.routes_pricing import router as pricing_router
from matchengine.infrastructure.api.routes_subscriptions import router as subscriptions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if settings.record_store_backend == "sql":
        try:
            async with engine.begin():
                pass  # Connection pool warmed up
            logger.info("Database connection established")
        except Exception as e:
            logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


async def engine_error_handler(request: Request, exc: EngineError):
    cid = request.headers.get("x-correlation-id")
    logger.warning("[%s] %s %s failed: %s", cid or "-", request.method, request.url.path, exc.kind.value)
    return error_response(exc, cid)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Match Engine — assignment lifecycle & auto-rematch",
        description="Provider approval, rejection with automatic rematch, and subscription pricing",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the customer / provider portals
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EngineError, engine_error_handler)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(subscriptions_router, prefix="/api")
    app.include_router(pricing_router, prefix="/api")

    return app


app = create_app()
