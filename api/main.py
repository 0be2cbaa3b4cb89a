"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.registry import TableLimitError, TableNotFoundError
from api.routes import tables
from blackjack.errors import (
    ConfigurationError,
    InvalidActionForStateError,
    InvalidBetError,
    TableError,
    UnknownPlayerError,
)
from blackjack.logging_setup import configure_logging
from config import config

configure_logging(config.logging)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _table_error_status(exc: TableError) -> int:
    if isinstance(exc, UnknownPlayerError):
        return 404
    if isinstance(exc, (InvalidBetError, ConfigurationError)):
        return 422
    return 409


def _table_error_handler(request: Request, exc: TableError) -> JSONResponse:
    """Turn table errors into JSON; state rejections list the legal actions."""
    content: dict[str, object] = {"detail": str(exc)}
    if isinstance(exc, InvalidActionForStateError):
        content["legal_actions"] = [a.value for a in exc.legal_actions]
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=_table_error_status(exc), content=content)


def _table_not_found_handler(request: Request, exc: TableNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def _table_limit_handler(request: Request, exc: TableLimitError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Table",
    description="Blackjack round engine API",
    version="0.1.0",
    debug=config.debug,
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(TableError, _table_error_handler)
app.add_exception_handler(TableNotFoundError, _table_not_found_handler)
app.add_exception_handler(TableLimitError, _table_limit_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(tables.router, prefix="/api/tables", tags=["tables"])


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    serve()
