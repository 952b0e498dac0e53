"""
College Leave Portal - FastAPI application.

Backend-for-frontend over the leave-management API: holds the signed-in
session, runs the leave workflow and renders list views. Docs live at the
root, routers under the API prefix.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Union

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from leave_portal.core.config import settings
from leave_portal.core.exceptions import AppException
from leave_portal.core.logging import setup_logging
from leave_portal.core.middleware import CorrelationIdMiddleware, LoggingMiddleware
from leave_portal.database import SessionLocal, init_db
from leave_portal.routers.api_router import api_router
from leave_portal.services.notification import NotificationService
from leave_portal.store import StateRepository, Store

# ============================================================================
# LOGGING SETUP
# ============================================================================
setup_logging()
logger = logging.getLogger(__name__)


# ============================================================================
# LIFESPAN MANAGEMENT
# ============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create the state table and hydrate the session store.
    Shutdown: nothing to release; every change is already written through.
    """
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment})")

    try:
        init_db()
        store = Store(StateRepository(SessionLocal))
        store.hydrate()
        app.state.store = store
        logger.info("✓ Session store hydrated")
    except Exception as e:
        logger.error(f"✗ State initialization failed: {e}")
        raise

    yield

    logger.info("Gracefully shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="College Leave Portal - students apply, teachers and admins approve",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ============================================================================
# MIDDLEWARE STACK (last added runs first)
# ============================================================================
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.request_id_header, "X-Process-Time"],
)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================
def _error_toast(request: Request, message: str) -> dict:
    store = getattr(request.app.state, "store", None)
    notifier = NotificationService(store.ui_settings if store else None)
    return notifier.error(message).model_dump()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = error["loc"][-1] if len(error["loc"]) > 0 else "unknown"
        errors.append({
            "field": str(field),
            "msg": error["msg"]
        })

    logger.warning(f"Validation Error: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "errors": errors}
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Form, upstream and auth failures. The message is already display-ready."""
    logger.warning(f"AppException: {exc.message}", extra={"code": exc.error_code})
    error = {"msg": exc.message, "code": exc.error_code}
    if exc.details:
        error["details"] = exc.details
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "errors": [error],
            "toast": _error_toast(request, exc.message),
        }
    )


@app.exception_handler(StarletteHTTPException)
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: Union[HTTPException, StarletteHTTPException]):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "errors": [{"msg": exc.detail if isinstance(exc.detail, str) else "Request failed"}]
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled server error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "errors": [{"msg": "An unexpected server error occurred."}]
        }
    )


# ============================================================================
# ROUTERS
# ============================================================================
app.include_router(api_router, prefix=settings.api_prefix)


# ============================================================================
# OPERATIONAL ENDPOINTS (at root level)
# ============================================================================
@app.get("/", tags=["Health"])
def root():
    return {
        "message": f"{settings.app_name} API",
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Liveness probe."""
    return {
        "status": "up",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.version,
        "environment": settings.environment,
    }


@app.get("/readiness", tags=["Health"])
def readiness_check():
    """Readiness probe - verifies the state database."""
    try:
        with SessionLocal() as session:
            session.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "components": {"state_database": "connected"},
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Service not ready")


@app.get("/liveness", tags=["Health"])
def liveness_check():
    return health_check()
