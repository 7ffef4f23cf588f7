"""CodGuard Gate - Main Entry Point."""

import os

from codguard.config.settings import settings
from codguard.server.app import create_app

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = os.getenv("RELOAD", "false").lower() == "true"

    uvicorn.run(
        "codguard.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=30,
        timeout_keep_alive=5,
        access_log=False,  # Disable uvicorn access log (we use structured logging)
    )
