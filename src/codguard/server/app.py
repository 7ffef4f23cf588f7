"""FastAPI application setup and configuration."""

from typing import Optional

from fastapi import FastAPI

from codguard import __version__
from codguard.config.settings import settings
from codguard.core.logger import setup_logger
from codguard.core.monitoring import init_monitoring
from codguard.services.runtime import Runtime, build_runtime

logger = setup_logger(__name__)


def create_app(runtime: Optional[Runtime] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        runtime: Pre-built runtime (default: built from environment settings at startup)

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="CodGuard Gate",
        version=__version__,
        description="COD rating check at checkout and bundled order outcome sync",
    )

    # Initialize GlitchTip error monitoring (Sentry-compatible)
    init_monitoring(settings.glitchtip_dsn, settings.environment)

    # Import and include routers
    from codguard.server import dashboard_routes, routes

    app.include_router(routes.router)
    app.include_router(dashboard_routes.router)

    @app.on_event("startup")
    async def startup_handler():
        """
        Initialize resources on application startup.

        Builds the runtime, writes default settings on first start, starts
        the scheduler and re-arms the bundled send for queued orders.
        """
        logger.info("Starting application resources...")

        app.state.runtime = runtime or build_runtime(settings)
        await app.state.runtime.start()

        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_handler():
        """Stop the scheduler and close connections. Queued orders are kept."""
        logger.info("Starting graceful shutdown...")

        try:
            await app.state.runtime.stop()
            logger.info("Graceful shutdown completed successfully")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}", exc_info=True)

    return app
