# orgadmin/core/exceptions.py

"""
애플리케이션 공통 오류 분류 체계와 전역 예외 처리기를 정의하는 모듈입니다.

모든 응답은 다음의 공통 봉투(envelope) 형식을 따릅니다.
    { "success": bool, "message"?: str, "data"?: any, "errors"?: {field: [str]} }

- ValidationError   : 422, 필드별 오류 메시지 맵 포함
- UnauthorizedError : 401, 자격 증명/토큰 누락 또는 무효
- NotFoundError     : 404, 대상 엔티티 없음
- ConflictError     : 400, 종속 레코드로 인해 삭제 불가 등
- InternalError     : 500, 저장소/파일 시스템 오류 (메시지는 일반화하여 노출)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

ErrorMap = Dict[str, List[str]]


class AppError(Exception):
    """공통 봉투로 변환되는 모든 애플리케이션 예외의 기본 클래스"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[ErrorMap] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Validation error"

    def __init__(self, errors: ErrorMap, message: Optional[str] = None):
        super().__init__(message, errors=errors)


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthenticated."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    # 원래 API 계약에 맞춰 409가 아닌 400을 사용합니다.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


def envelope(
    *,
    success: bool = True,
    message: Optional[str] = None,
    data: Any = None,
    errors: Optional[ErrorMap] = None,
) -> Dict[str, Any]:
    """공통 응답 봉투 딕셔너리를 만듭니다. 값이 없는 선택 키는 생략합니다."""
    body: Dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def humanize(field_name: str) -> str:
    """'div_code' → 'div code' (오류 메시지용)"""
    return field_name.replace("_", " ")


def errors_from_pydantic(raw_errors: List[Dict[str, Any]]) -> ErrorMap:
    """
    pydantic 오류 목록을 필드별 메시지 맵으로 변환합니다.
    필드마다 첫 번째 위반만 남기고(필드 단위 단락), 필드 간에는 모두 누적합니다.
    """
    errors: ErrorMap = {}
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[0] if loc else "__root__"
        if field in errors:
            continue
        if err.get("type") == "missing":
            errors[field] = [f"The {humanize(field)} field is required."]
            continue
        message = err.get("msg", "Invalid value")
        # model_validator에서 ValueError로 올린 메시지의 접두어 제거
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors[field] = [message]
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """전역 예외 처리기를 등록합니다."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s 처리 중 내부 오류: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(success=False, message=exc.message, errors=exc.errors),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=envelope(success=False, message="Validation error", errors=errors_from_pydantic(exc.errors())),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(success=False, message=message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # 원본 예외 메시지는 로그에만 남기고 응답에는 일반 메시지만 노출합니다.
        logger.exception("처리되지 않은 예외: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope(success=False, message=InternalError.default_message),
        )
