"""
Memez API - FastAPI Application

Social feed for memecoins: signed messages per token, likes, and two
utility endpoints (IPFS pinning and a test-network faucet).

Run with:
    uvicorn memez.main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from memez import __version__
from memez.api import router
from memez.config import get_settings
from memez.database import engine, init_db

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Messages for request fields that fail schema validation
FIELD_ERRORS = {
    "auth": '"timestamp" must be an integer',
    "timestamp": '"timestamp" must be an integer',
    "signature": '"signature" must be a string',
    "message": '"message" must be a string',
    "address": '"address" must be a string',
    "amount": '"amount" must be an integer',
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    logger.info("Starting Memez API...")
    await init_db()

    yield

    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title="Memez API",
    description="""
    Social feed backend for memecoins.

    ## Features
    - Messages signed with a wallet, listed per memecoin
    - Likes kept as one ledger row per user and message
    - IPFS pinning through Pinata
    - Test-network faucet through Tenderly

    ## Architecture
    - Single relational database (PostgreSQL)
    - Stateless request handling, atomicity from the database
    """,
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def validation_message(exc: RequestValidationError) -> str:
    """One client-facing message for the first invalid request field."""
    error = exc.errors()[0]
    if error.get("type") == "json_invalid":
        return "Request body must be valid JSON"

    # Union members add their type name ("int", "float") to the location
    fields = [part for part in error.get("loc", ()) if isinstance(part, str)]
    for field in reversed(fields):
        if field in FIELD_ERRORS:
            return FIELD_ERRORS[field]

    field = fields[-1] if fields else "body"
    if field == "body":
        return "Request body is required"
    return f'"{field}" is invalid'


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown method on a known path is reported like an unknown path
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Not Found"})

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(exc)
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "memez.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="info",
    )
