"""FastAPI application hosting a single pool for test harnesses.

Note: the service keeps all state in memory and has no authentication; the
``caller`` field of each request is taken at face value. It exists to drive
the pool from outside the process, not to be exposed publicly.
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.api.host import get_default_host
from cpamm.errors import (
    InvariantViolation,
    NotGovernor,
    PoolError,
    ReentrantCall,
    TransferError,
)
from cpamm.logging import configure_logging
from cpamm.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPAMM_HOST", "127.0.0.1")
PORT = int(os.environ.get("CPAMM_PORT", "8000"))
DEBUG = os.environ.get("CPAMM_DEBUG", "false").lower() in ("true", "1", "yes")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Build the pool host before serving so bad settings fail at startup."""
    host = get_default_host()
    logger.info(
        "pool_host_ready",
        fee_bps=host.pool.fee_bps,
        twap_interval_seconds=host.pool.twap_interval_seconds,
        governors=host.pool.governors(),
    )
    yield


app = FastAPI(
    title="Constant-product pool harness",
    description="In-memory two-asset constant-product pool with mock tokens",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)


def status_for(err: PoolError) -> int:
    """HTTP status code for a pool error."""
    if isinstance(err, NotGovernor):
        return 403
    if isinstance(err, ReentrantCall):
        return 409
    if isinstance(err, TransferError):
        return 402
    if isinstance(err, InvariantViolation):
        return 500
    return 400


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Return pool errors as JSON with a stable error code."""
    status = status_for(exc)
    logger.info("request_rejected", path=request.url.path, error=exc.code, status=status)
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the harness API server.

    Configuration via environment variables:
    - CPAMM_HOST: Host to bind to (default: 127.0.0.1)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug logging and reload mode (default: false)
    - CPAMM_FEE_BPS / CPAMM_TWAP_INTERVAL / CPAMM_DEPLOYER: initial pool setup
    """
    configure_logging(logging.DEBUG if DEBUG else logging.INFO)
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
