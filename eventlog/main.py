from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventlog.config import get_settings
from eventlog.logutil import get_event_logger
from eventlog.models.schemas import HealthResponse, InfoResponse
from eventlog.observability.logging import configure_logging
from eventlog.observability.middleware import RequestContextMiddleware
from eventlog.response import respond_with_error, respond_with_success
from eventlog.utils import get_home_dir


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "")


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = respond_with_error(exc.status_code, str(exc.detail), exc, _correlation_id(request))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return respond_with_error(422, "Invalid request", exc, _correlation_id(request))


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level_value)

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    @app.on_event("startup")
    def _startup() -> None:
        get_event_logger().log_success("app_started", {"app": settings.app_name})

    @app.get("/health", response_model=HealthResponse)
    async def health() -> JSONResponse:
        return respond_with_success(200, HealthResponse())

    @app.get("/api/info", response_model=InfoResponse)
    async def info() -> JSONResponse:
        payload = InfoResponse(
            name=settings.app_name,
            debug=get_event_logger().debug,
            working_dir=get_home_dir(),
        )
        return respond_with_success(200, payload)

    return app


app = create_app()
