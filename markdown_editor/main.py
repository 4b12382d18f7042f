"""FastAPI application entry point."""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from . import __version__
from .config import settings
from .database import engine, get_db, ping_database, warmup_connection_pool
from .exceptions import ActionError, ValidationError
from .routers import actions_router

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""
    logger.info("Warming up database connection pool...")
    await warmup_connection_pool()
    logger.info("Database connection pool ready")

    yield

    logger.info("Disposing database engine...")
    await engine.dispose()


app = FastAPI(
    title="Markdown Editor API",
    description="Documents and versioned markdown content for the markdown editor",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ActionError)
async def action_error_handler(request: Request, exc: ActionError):
    """Render a typed action error as {code, message}."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report input schema violations as BAD_REQUEST with per-field issues."""
    issues = []
    for error in exc.errors():
        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if isinstance(ctx_error, Exception) else error.get("msg", "")
        path = [str(part) for part in error.get("loc", ()) if part != "body"]
        issues.append({"path": path, "message": message})

    first = issues[0] if issues else None
    if first and first["path"]:
        message = f"{'.'.join(first['path'])}: {first['message']}"
    elif first:
        message = first["message"]
    else:
        message = "Invalid input."

    error = ValidationError(message, issues=issues)
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder(error.to_dict()),
    )


# Database pool exhaustion handler - return 503 so clients can retry
@app.exception_handler(SQLAlchemyTimeoutError)
async def db_pool_exhausted_handler(request: Request, exc: SQLAlchemyTimeoutError):
    """Handle database connection pool exhaustion with 503 Service Unavailable."""
    logger.warning(
        f"Database pool exhausted on {request.method} {request.url}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "code": "SERVICE_UNAVAILABLE",
            "message": "Service temporarily unavailable. Please retry.",
        },
        headers={"Retry-After": "5"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log all unhandled exceptions with full traceback."""
    logger.error(f"Unhandled exception on {request.method} {request.url}:")
    logger.error(f"Exception type: {type(exc).__name__}")
    logger.error(f"Exception message: {str(exc)}")
    logger.error(f"Traceback:\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_SERVER_ERROR", "message": "Internal server error"},
    )


app.include_router(actions_router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "healthy",
        "service": "Markdown Editor API",
        "version": __version__,
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint for monitoring."""
    database_ok = await ping_database(db)
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
    }
