import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.core.middleware import RequestIdMiddleware
from app.api.v1.router import v1_router, public_router
from app.db.session import check_connection, dispose_engine

logger = logging.getLogger(__name__)

GENERIC_ERROR_MSG = "Something went wrong on the server"


def _failure(
    request: Request,
    status_code: int,
    message: str,
    exc: Optional[BaseException] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = {"success": False, "message": message}
    if exc is not None and request.app.state.settings.is_development:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _failure(
            request,
            exc.status_code,
            str(exc.detail),
            exc,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            loc = ".".join(str(p) for p in errors[0].get("loc", ()))
            message = f"Invalid request {loc}: {errors[0].get('msg')}"
        else:
            message = "Invalid request"
        return _failure(request, 400, message, exc)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(
            "unhandled error",
            exc_info=exc,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "path": request.url.path,
            },
        )
        # raw driver errors carry SQL and row data; only development sees them
        message = GENERIC_ERROR_MSG
        if request.app.state.settings.is_development:
            message = str(exc) or GENERIC_ERROR_MSG
        return _failure(request, 500, message, exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # no degraded mode: an unreachable store aborts startup
        try:
            check_connection()
        except Exception:
            logger.critical("database unreachable, refusing to start", exc_info=True)
            raise
        logger.info(
            "server started",
            extra={"environment": settings.environment, "api_prefix": settings.api_prefix},
        )
        yield
        dispose_engine()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    register_error_handlers(app)

    @app.get("/", tags=["health"])
    async def read_root():
        return {
            "message": settings.app_name,
            "status": "running",
            "date": datetime.now(timezone.utc).isoformat(),
        }

    # API (owner-scoped + auth)
    app.include_router(v1_router, prefix=settings.api_prefix)
    # Public proposal links
    app.include_router(public_router)

    return app


app = create_app()
