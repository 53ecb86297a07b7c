from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from log_ingestor.api.routes.ingest import router as ingest_router
from log_ingestor.api.routes.logs import router as logs_router
from log_ingestor.core.config import settings
from log_ingestor.core.errors import LogNotFoundError, MalformedInputError
from log_ingestor.core.logging import configure_logging, request_id_var
from log_ingestor.db.session import engine, init_db
from log_ingestor.schemas.errors import ErrorDetails
from log_ingestor.services.log_store import InMemoryLogStore

logger = logging.getLogger("log_ingestor")


# -------------------------
# Response helpers
# -------------------------
def error_response(status_code: int, message: str, description: str) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content=ErrorDetails(message=message, description=description).model_dump(),
    )


def _uri(request: Request) -> str:
    return f"uri={request.url.path}"


# -------------------------
# App factory
# -------------------------
app = FastAPI(
    title="Log Ingestor API",
    version="0.1.0",
    default_response_class=ORJSONResponse,
)


# -------------------------
# Middleware
# -------------------------
app.add_middleware(GZipMiddleware, minimum_size=1024)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request-id + timing + body-size guard
@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    token = request_id_var.set(request_id)
    start = time.perf_counter()
    try:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                if int(content_length) > settings.MAX_BODY_BYTES:
                    response = error_response(
                        413,
                        f"Request body too large. Max is {settings.MAX_BODY_KB} KB.",
                        _uri(request),
                    )
                    response.headers["x-request-id"] = request_id
                    return response
            except ValueError:
                pass

        response = await call_next(request)
    finally:
        request_id_var.reset(token)

    response.headers["x-request-id"] = request_id
    response.headers["x-response-ms"] = f"{(time.perf_counter() - start) * 1000:.2f}"
    return response


# -------------------------
# Routes
# -------------------------
@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.ENV, "store": settings.STORE_BACKEND}


app.include_router(ingest_router, tags=["ingest"])
app.include_router(logs_router, tags=["logs"])


# -------------------------
# Error handling
# -------------------------
@app.exception_handler(LogNotFoundError)
async def log_not_found_handler(request: Request, exc: LogNotFoundError):
    logger.info("Not found on %s %s: %s", request.method, request.url.path, exc)
    return error_response(settings.NOT_FOUND_STATUS_CODE, str(exc), _uri(request))


@app.exception_handler(MalformedInputError)
async def malformed_input_handler(request: Request, exc: MalformedInputError):
    logger.info("Malformed input on %s %s: %s", request.method, request.url.path, exc)
    return error_response(400, str(exc), _uri(request))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    description = _uri(request)
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        description = f"{location}: {first.get('msg', 'invalid value')}"
    return error_response(400, "Validation failed", description)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), _uri(request))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    # Show minimal debug info only in dev
    message = "An unexpected error occurred."
    if settings.ENV == "dev":
        message = f"{exc.__class__.__name__}: {exc}"

    return error_response(500, message, _uri(request))


# -------------------------
# Startup / shutdown
# -------------------------
@app.on_event("startup")
async def on_startup():
    configure_logging(settings.LOG_LEVEL)

    if settings.STORE_BACKEND == "memory":
        app.state.memory_store = InMemoryLogStore()
        logger.warning("Using in-memory log store; logs are lost on restart.")
        return

    await init_db()


@app.on_event("shutdown")
async def on_shutdown():
    await engine.dispose()
