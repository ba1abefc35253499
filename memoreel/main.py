"""
Application factory with database pool lifecycle management.

Run with:
    uvicorn memoreel.main:app
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from memoreel.config import Settings, load_settings
from memoreel.db.pool import DatabasePoolManager
from memoreel.infrastructure.observability.logging import get_logger, log_request, setup_logging
from memoreel.middleware.request_context import RequestContextMiddleware
from memoreel.routes import auth, health, me, reels, videos

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit configuration; loaded from the environment when omitted
    """
    settings = settings or load_settings()
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    db = DatabasePoolManager(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting", environment=settings.environment, debug=settings.debug)

        await db.initialize()
        logger.info("All services initialized successfully", services=["database_pool"])

        yield

        logger.info("Application shutting down")
        try:
            await db.close()
        except Exception as e:
            logger.error("Error closing database pool", error=str(e))
            raise

    app = FastAPI(
        title="Memoreel",
        description="Video reel sharing backend",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.include_router(health.router)
    app.include_router(me.router)
    app.include_router(reels.router)
    app.include_router(videos.router)
    app.include_router(auth.router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log HTTP requests with timing."""
        start_time = time.time()
        response = await call_next(request)
        log_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response

    # Added last so it wraps the request logger and the request id is bound first
    app.add_middleware(RequestContextMiddleware)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.PORT)
