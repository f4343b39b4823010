"""FastAPI application for the stable pair."""

import logging

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stablepool.api.endpoints import router
from stablepool.config import PairSettings
from stablepool.errors import PairError

logger = structlog.get_logger()

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="Stable Pair",
    description="Two-asset StableSwap pair with an amp ramp, TWAP oracle and reward ledger",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(PairError)
@app.exception_handler(ArithmeticError)
async def pair_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Rejected operations become 400s naming the error class."""
    logger.warning(
        "operation_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    return JSONResponse(
        status_code=400,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def configure_logging(level: str) -> None:
    """Route structlog output to the console at the given level.

    Raises:
        ValueError: If level is not one of LOG_LEVELS
    """
    try:
        min_level = LOG_LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}, expected one of {sorted(LOG_LEVELS)}") from None
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
    )


# Runs on every import, so uvicorn reload workers are configured too
configure_logging(PairSettings.from_env().log_level)


def run() -> None:
    """Run the pair API server.

    Configuration via environment variables:
    - STABLEPOOL_HOST: Host to bind to (default: 0.0.0.0)
    - STABLEPOOL_PORT: Port to bind to (default: 8000)
    - STABLEPOOL_DEBUG: Enable debug/reload mode (default: false)
    - STABLEPOOL_LOG_LEVEL: Minimum log level (default: info)
    - STABLEPOOL_* pair settings, see stablepool.config.PairSettings
    """
    settings = PairSettings.from_env()
    uvicorn.run(
        "stablepool.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
