# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from meras_db import get_db_service
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import AccessError, Unauthorized
from .routes import (
    audit,
    bookings,
    bot_flows,
    contacts,
    conversations,
    health,
    templates,
    whatsapp_accounts,
)
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
    yield
    await get_db_service().close()


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def access_error_handler(request: Request, exc: AccessError):
    """Render access-layer failures as ``{"success": false, "error": ...}``."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return _error(exc.status_code, exc.message, headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(422, str(exc.errors()))


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    return _error(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessError, access_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


app = FastAPI(
    title=settings.APP_NAME,
    description="Role-scoped data access for the Meras WhatsApp CRM",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

register_exception_handlers(app)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(contacts.router, prefix="/api/contacts", tags=["contacts"])
app.include_router(conversations.router, prefix="/api/conversations", tags=["conversations"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(templates.router, prefix="/api/templates", tags=["templates"])
app.include_router(bot_flows.router, prefix="/api/bot-flows", tags=["bot-flows"])
app.include_router(
    whatsapp_accounts.router, prefix="/api/whatsapp-accounts", tags=["whatsapp-accounts"]
)
app.include_router(audit.router, prefix="/api/audit", tags=["audit"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": f"Welcome to {settings.APP_NAME}"}
