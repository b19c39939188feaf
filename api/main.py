"""FastAPI service for Contact Book."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import DEV_ORIGINS, get_settings
from api.models import HealthResponse
from api.routers import contacts_router
from contact_book import __version__
from contact_book.config import Settings
from contact_book.contacts import ContactStoreError, ValidationError

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Contact Book API",
    version=__version__,
    description="REST interface for contacts persisted in a JSON file.",
)

origins = [origin for origin in DEV_ORIGINS + get_settings().allowed_origins if origin]

if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Headers set on every response, as helmet does for Express services.
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
}


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Access log: method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
    )
    return response


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "errors": [violation.to_dict() for violation in exc.violations],
        },
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed JSON or a missing body; reported like any other bad input.
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        detail = "Request body must be valid JSON"
    elif errors:
        detail = f"Invalid request: {errors[0].get('msg', 'unprocessable input')}"
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(ContactStoreError)
async def handle_store_error(request: Request, exc: ContactStoreError) -> JSONResponse:
    # The store path and the OS error stay in the logs only.
    logger.error(
        f"[contacts] {request.method} {request.url.path} failed: "
        f"{type(exc).__name__}: {exc} (path={exc.path}, cause={exc.__cause__!r})"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# =============================================================================
# Routes
# =============================================================================

@app.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)) -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }


app.include_router(contacts_router, prefix="/api/contacts", tags=["contacts"])
