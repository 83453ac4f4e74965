import logging
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from app.api.errors import ApiError, InternalError, MethodNotAllowed
from app.api.main import api_router
from app.core.config import settings
from app.core.db import engine
from app.core.pool import create_pool_manager

logging.basicConfig(level=settings.LOG_LEVEL)
_logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the connection pool once per process and close it on shutdown."""
    pool = create_pool_manager(settings)
    app.state.pool = pool
    # Diagnostic only: startup must not wait on (or fail with) the database
    threading.Thread(target=pool.verify, name="pool-verify", daemon=True).start()
    try:
        yield
    finally:
        pool.dispose()
        engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Global exception handlers — standardized error response format
# ---------------------------------------------------------------------------


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render a tagged ApiError variant as its JSON envelope."""
    if exc.status_code >= 500:
        _logger.warning(
            "%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_content(),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework-raised 404/405 use the same envelope as handler errors."""
    if exc.status_code == 405:
        allowed = (exc.headers or {}).get("Allow", "")
        return await api_error_handler(
            request, MethodNotAllowed([m.strip() for m in allowed.split(",") if m.strip()])
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": str(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422 in the error envelope; one "field: problem" entry per failed field."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problem = err.get("msg", "Invalid value")
        problems.append(f"{field}: {problem}" if field else problem)
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": "; ".join(problems)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything no handler mapped: logged with traceback, client gets a generic 500."""
    _logger.error(
        "Unhandled %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return await api_error_handler(request, InternalError("Internal server error"))


# Set all CORS enabled origins
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)
