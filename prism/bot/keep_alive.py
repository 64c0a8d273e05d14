"""
Keep-alive web server.
Exposes health endpoints for hosting platforms that probe HTTP.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from prism import __version__
from prism.bot.config import Config
from prism.bot.database import is_connected
from prism.utils.error_handler import get_error_handler
from prism.utils.logger import get_logger
from prism.utils.monitoring import Monitoring

logger = get_logger("KeepAlive")

# Track bot status
_bot_status: Dict[str, Any] = {
    "status": "starting",
    "discord_connected": False,
}

_monitoring: Optional[Monitoring] = None


def update_bot_status(**kwargs: Any) -> None:
    """Update bot status for health endpoint."""
    _bot_status.update(kwargs)


def set_monitoring(monitoring: Optional[Monitoring]) -> None:
    """Attach the monitoring whose counters /health reports."""
    global _monitoring
    _monitoring = monitoring


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    logger.info("Keep-alive server starting...")
    yield
    logger.info("Keep-alive server shutting down...")


app = FastAPI(
    title="Prism",
    description="Prism quote bot keep-alive server",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Prism",
        "version": __version__,
        "status": _bot_status.get("status", "unknown"),
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring."""
    database_ok = is_connected()
    discord_ok = bool(_bot_status.get("discord_connected"))

    status = "healthy" if database_ok and discord_ok else "degraded"

    content: Dict[str, Any] = {
        "status": status,
        "discord": "connected" if discord_ok else "disconnected",
        "database": "connected" if database_ok else "disconnected",
    }
    if _monitoring is not None:
        content["metrics"] = _monitoring.get_app_metrics()
    content["errors"] = get_error_handler().summary()

    return JSONResponse(status_code=200 if status == "healthy" else 503, content=content)


@app.get("/ping")
async def ping():
    """Simple ping endpoint."""
    return {"pong": True}


async def start_server(settings: Config) -> None:
    """Start the keep-alive server."""
    import uvicorn

    config_uvicorn = uvicorn.Config(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="warning",
        access_log=False,
    )
    server = uvicorn.Server(config_uvicorn)

    logger.info(f"Keep-alive server listening on port {settings.PORT}")
    await server.serve()


def run_server(settings: Config) -> asyncio.Task:
    """Run server in background task."""
    return asyncio.create_task(start_server(settings))
