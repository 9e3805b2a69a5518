# orgadmin/core/schemas.py

"""
여러 도메인에서 공통으로 사용하는 API 스키마를 정의하는 모듈입니다.

- Envelope[T] : 공통 응답 봉투 { success, message, data, errors }
- PageData[T] : 페이지 목록 응답의 data 부분
- InputSchema : 요청 본문 스키마의 기본 클래스 (공백 정리, 빈 문자열 → null, null 허용 규칙)
"""

from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_serializer, model_validator
from sqlmodel import SQLModel

from orgadmin.core.exceptions import ErrorMap, humanize

DataT = TypeVar("DataT")


# =============================================================================
# 1. 응답 봉투
# =============================================================================
class Envelope(BaseModel, Generic[DataT]):
    """
    공통 응답 봉투.
    값이 없는 최상위 선택 키(message, data, errors)는 직렬화할 때 생략하므로
    성공 응답과 오류 응답의 모양이 envelope()와 같습니다.
    """
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None
    errors: Optional[ErrorMap] = None

    @model_serializer(mode="wrap")
    def omit_empty_keys(self, handler):
        body = handler(self)
        return {key: value for key, value in body.items() if value is not None}


class PageData(BaseModel, Generic[DataT]):
    """페이지 단위 목록 응답"""
    current_page: int
    data: List[DataT]
    per_page: int
    total: int
    last_page: int
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None

    model_config = {"populate_by_name": True}


# =============================================================================
# 2. 요청 본문 기본 클래스
# =============================================================================
class InputSchema(SQLModel):
    """
    요청 본문 스키마의 기본 클래스입니다.

    - 문자열 값의 앞뒤 공백을 제거하고, 빈 문자열은 null로 취급합니다 (비밀번호 필드 제외).
    - null로 전달된 값 중 기본값이 있는 필드와 `null_ignored`에 나열된 필드는 전달되지 않은 것으로 봅니다.
    - 필수 필드와 `not_nullable`에 나열된 필드에 명시적으로 null이 오면
      'The x field is required.' 오류가 됩니다.
    """
    not_nullable: ClassVar[Tuple[str, ...]] = ()
    null_ignored: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _normalize_input(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, str) and "password" not in key:
                value = value.strip()
            if isinstance(value, str) and value == "":
                value = None
            if value is None and key in cls.model_fields:
                field_info = cls.model_fields[key]
                if key in cls.null_ignored or (not field_info.is_required() and field_info.default is not None):
                    continue
            normalized[key] = value
        return normalized

    @field_validator("*", mode="before")
    @classmethod
    def _reject_explicit_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and (
            info.field_name in cls.not_nullable or cls.model_fields[info.field_name].is_required()
        ):
            raise ValueError(f"The {humanize(info.field_name)} field is required.")
        return value
