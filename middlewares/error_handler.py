import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.errors import ServiceError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, request: Request) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message),
        trace_id=request.headers.get("X-Request-ID"),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def add_error_handlers(app: FastAPI):
    # ✅ 도메인 예외 (검증/권한/없음/학번 재계산) → 상태코드 + 에러코드
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 실패: {exc.code} - {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} 거부: {exc.code} - {exc.message}")
        return _error_response(exc.status_code, exc.code, exc.message, request)

    # ✅ 처리되지 않은 예외 → 500 (스택트레이스는 로그에만)
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} 처리 중 예외 발생")
        return _error_response(500, "INTERNAL_ERROR", "Internal server error", request)
