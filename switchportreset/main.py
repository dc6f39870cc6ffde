"""
SwitchPortReset API

HTTP front door: GET /reset/{mac} power-cycles the switch port of a wired
UniFi client and answers {success, message}.
"""

import asyncio
import sys
from typing import Awaitable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import ConfigError, Settings, get_settings, load_settings
from switchportreset.models.schemas import ResetResponse
from switchportreset.services import reset_service
from switchportreset.utils.logger import logger

VERSION = "1.0.0"

# how often a running reset checks whether the caller is still connected
DISCONNECT_POLL_INTERVAL = 0.5


async def _cancel_on_disconnect(
    request: Request, operation: Awaitable[ResetResponse]
) -> ResetResponse:
    """Runs operation, cancelling it if the HTTP caller goes away."""
    task = asyncio.ensure_future(operation)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning(f"Client disconnected, cancelling {request.url.path}")
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                return ResetResponse(success=False, message="Request cancelled: client disconnected")
    finally:
        if not task.done():
            task.cancel()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="SwitchPortReset API",
        description="Power-cycle the UniFi switch port a wired client is connected to",
        version=VERSION,
        debug=settings.debug,
    )
    app.state.settings = settings

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"SwitchPortReset API запускается, контроллер: {settings.baseurl}")

    # ==================== General Endpoints ====================

    @app.get("/health", tags=["General"])
    async def health_check():
        """Health check endpoint for Docker/K8s."""
        return {"status": "healthy", "version": VERSION}

    # ==================== Reset Endpoints ====================

    @app.get("/reset/{mac}", response_model=ResetResponse, tags=["Reset"])
    async def reset_port(mac: str, request: Request):
        """
        Power-cycles the switch port the wired client with this MAC is attached to.
        200 on success, 400 on any failure.
        """
        logger.info(f"Получен запрос на сброс порта для {mac}")
        result = await _cancel_on_disconnect(
            request,
            reset_service.reset_switch_port(mac, request.app.state.settings),
        )
        return JSONResponse(
            status_code=200 if result.success else 400,
            content=result.model_dump(),
        )

    return app


def run():
    """Entry point: read the environment and serve on api_host:api_port."""
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.setLevel(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        access_log=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    run()
