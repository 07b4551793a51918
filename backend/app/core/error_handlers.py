"""오류 → JSON 봉투 {"error", "details"} 변환"""
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.auth import clear_session_cookie
from app.core.errors import AppError, Unauthorized, describe

log = structlog.get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("request_failed", path=request.url.path, method=request.method, error=exc.error, details=exc.details)
        response = JSONResponse(status_code=exc.status_code, content=exc.to_content())
        if isinstance(exc, Unauthorized) and exc.clear_cookie:
            clear_session_cookie(response)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("unhandled_exception", path=request.url.path, method=request.method)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": describe(exc)},
        )
