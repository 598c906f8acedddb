import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.common import ErrorDetail, ErrorResponse, error_code_for

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: ErrorDetail, headers=None) -> JSONResponse:
    body = ErrorResponse(error=detail, latency_ms=0)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def add_error_handlers(app: FastAPI):
    # ✅ 서비스/라우터에서 raise HTTPException(...) 한 경우 (404, 403, 409 ...)
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} → {exc.status_code}: {exc.detail}")
        return _error_response(
            exc.status_code,
            ErrorDetail(code=error_code_for(exc.status_code), message=str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    # ✅ 요청 본문/파라미터 검증 실패 (422)
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [
            {"loc": [str(p) for p in err.get("loc", ())], "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error_response(
            422,
            ErrorDetail(code="VALIDATION_ERROR", message="요청 값이 올바르지 않습니다", fields=fields),
        )

    # ✅ 그 외 처리되지 않은 예외 (500)
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(
            500,
            ErrorDetail(code="INTERNAL_ERROR", message=str(exc)),
        )
