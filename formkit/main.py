"""formkit — form definition and answer validation service.

Main FastAPI application with lifespan management, CORS, and global error handling.
"""

import logging
from contextlib import asynccontextmanager

import structlog
import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formkit.config import get_settings
from formkit.api.router import api_router
from formkit.services.form_store import FormNotFound, FormStore
from formkit.validators.models import AnswerValidationError, UnknownAnswerField

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if get_settings().DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    settings = get_settings()

    # ── Startup ──
    logger.info("app_starting", debug=settings.DEBUG)

    # Initialize Redis
    try:
        app.state.redis = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            encoding="utf-8",
        )
        await app.state.redis.ping()
        logger.info("redis_connected", url=settings.REDIS_URL)
    except Exception as e:
        logger.error("redis_connection_failed", error=str(e))
        # App can still start; storage endpoints answer 503
        app.state.redis = None

    # Initialize Form Store
    app.state.form_store = FormStore(app.state.redis) if app.state.redis else None

    logger.info("app_started")

    yield

    # ── Shutdown ──
    logger.info("app_shutting_down")

    if app.state.redis:
        await app.state.redis.aclose()
        logger.info("redis_disconnected")

    logger.info("app_stopped")


# ── Create Application ──

app = FastAPI(
    title="formkit",
    description=(
        "Form builder backend. Owners define forms of typed, constrained fields; "
        "respondents submit answers that are validated against the form before storage."
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Middleware ──

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Global Exception Handlers ──

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all error handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again.",
        },
    )


@app.exception_handler(AnswerValidationError)
async def answer_validation_error_handler(request: Request, exc: AnswerValidationError):
    """A submission broke a field rule; report the first one."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "field": exc.failure.field,
            "rule": exc.failure.rule.value,
            "message": exc.failure.detail,
        },
    )


@app.exception_handler(UnknownAnswerField)
async def unknown_answer_field_handler(request: Request, exc: UnknownAnswerField):
    return JSONResponse(
        status_code=422,
        content={"error": "unknown_field", "fields": exc.names, "message": str(exc)},
    )


@app.exception_handler(FormNotFound)
async def form_not_found_handler(request: Request, exc: FormNotFound):
    return JSONResponse(
        status_code=404,
        content={"error": "not_found", "message": str(exc)},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "message": str(exc)},
    )


# ── Routes ──

app.include_router(api_router, prefix="/api/v1")


# ── Root endpoint ──

@app.get("/")
async def root():
    """Root endpoint — API info."""
    return {
        "name": "formkit",
        "version": "1.0.0",
        "description": "Form definition and answer validation service",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
