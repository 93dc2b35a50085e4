"""
HTTP surface for the track relay.

Endpoints:
1. POST /api/track - batch tracking lookup
2. GET /api/health - liveness probe
3. / - static assets from the public directory
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from trackrelay import __version__
from trackrelay.config import RelayConfig, get_config
from trackrelay.models import ErrorResponse, HealthStatus, TrackRequest
from trackrelay.tracking import FedExAPI, TrackingManager


def build_manager(config: RelayConfig) -> TrackingManager:
    """Create the FedEx backed tracking manager described by config."""
    carrier = FedExAPI(
        track_url=config.carrier_url,
        locale=config.locale,
        timeout=config.request_timeout,
    )
    return TrackingManager(carrier, delay_seconds=config.request_delay_seconds)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(
    config: Optional[RelayConfig] = None,
    manager: Optional[TrackingManager] = None,
) -> FastAPI:
    """
    Build the relay application.

    Args:
        config: Relay configuration (global config if omitted)
        manager: Tracking manager to use (FedEx manager from config if omitted)
    """
    config = config or get_config()
    manager = manager or build_manager(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Server ready at http://localhost:{config.port}")
        yield

    app = FastAPI(title="FedEx Track Relay", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.manager = manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/track")
    async def track(request: Request):
        """
        Track a batch of numbers.

        Per-item failures are reported inline with ok=false; only a failure
        handling the request itself gives a 500.
        """
        try:
            declared = request.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > config.max_body_bytes:
                return _error(413, "Request body too large")

            body = await request.body()
            if len(body) > config.max_body_bytes:
                return _error(413, "Request body too large")

            payload = json.loads(body) if body.strip() else {}
            if not isinstance(payload, dict):
                payload = {}

            track_request = TrackRequest.model_validate(payload)
            response = await request.app.state.manager.track_batch(track_request.numbers)
            return JSONResponse(content=response.model_dump(by_alias=True))

        except Exception as e:
            logger.exception(f"Track request failed: {e}")
            return _error(500, str(e) or type(e).__name__)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        status = HealthStatus(timestamp=datetime.utcnow(), version=__version__)
        return JSONResponse(content=status.model_dump(mode="json"))

    # Mounted last so API routes take precedence
    static_dir = Path(config.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    else:
        logger.warning(f"Static directory not found, not serving assets: {static_dir}")

    return app


def run_server(config: RelayConfig) -> None:
    """Run the relay with uvicorn until interrupted."""
    import uvicorn

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
