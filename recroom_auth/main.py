from typing import Optional
import logging
import uuid

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recroom_auth.core.config import AppSettings
from recroom_auth.core.logging import setup_logging
from recroom_auth.core.di import AppContainer
from recroom_auth.api.routes import router as api_router
from recroom_auth.domain.errors import InvalidRequestError, RouteError, UserError
from recroom_auth.domain.interfaces import UserService
from recroom_auth.transport.response import Failure, encode_response


def _request_id_header(request: Request) -> dict:
    return {"x-request-id": getattr(getattr(request, "state", object()), "request_id", "-")}


def create_app(settings: Optional[AppSettings] = None, user_service: Optional[UserService] = None) -> FastAPI:
    settings = settings or AppSettings()
    setup_logging(level=settings.log_level, json_format=settings.log_json, app_name=settings.app_name)
    logger = logging.getLogger("recroom_auth")

    app = FastAPI(title=settings.app_name)

    container = AppContainer(settings=settings, user_service=user_service)
    app.state.container = container  # type: ignore[attr-defined]

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        extra = {"request_id": request_id}
        request.state.request_id = request_id  # type: ignore[attr-defined]
        try:
            response = await call_next(request)
        finally:
            logger.debug("Request processed: %s %s", request.method, request.url.path, extra=extra)
        response.headers["x-request-id"] = request_id
        return response

    # Любая ошибка запроса -> тот же конверт, что и успешный ответ
    @app.exception_handler(UserError)
    async def user_error_handler(request: Request, exc: UserError) -> JSONResponse:
        logger.debug(
            "Request rejected: %s %s", exc.kind.value, exc.message,
            extra={"request_id": getattr(request.state, "request_id", "-")},
        )
        return encode_response(Failure(exc), headers=_request_id_header(request))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return encode_response(Failure(RouteError(exc.status_code, str(exc.detail))), headers=_request_id_header(request))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return encode_response(Failure(InvalidRequestError()), headers=_request_id_header(request))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error", extra={"request_id": getattr(request.state, "request_id", "-")}
        )
        return encode_response(Failure(UserError()), headers=_request_id_header(request))

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


def run() -> None:
    settings = app.state.container.settings  # type: ignore[attr-defined]
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    run()
