# orgadmin/domains/org/schemas.py

"""
'org' 도메인 (부서 및 직위 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.

소속 사용자 목록을 포함하는 상세 응답 스키마는 사용자 스키마를 참조하므로
'usr' 도메인의 schemas 모듈에 정의되어 있습니다.
"""

from typing import ClassVar, Optional, Tuple
from datetime import datetime
from sqlmodel import SQLModel, Field

from orgadmin.core.schemas import InputSchema


# =============================================================================
# 1. 부서 (Division) 스키마
# =============================================================================
class DivisionCreate(InputSchema):
    div_code: str = Field(..., max_length=10)
    div_name: str = Field(..., max_length=100)
    div_is_active: bool = True


class DivisionUpdate(InputSchema):
    not_nullable: ClassVar[Tuple[str, ...]] = ("div_code", "div_name")
    null_ignored: ClassVar[Tuple[str, ...]] = ("div_is_active",)

    div_code: Optional[str] = Field(None, max_length=10)
    div_name: Optional[str] = Field(None, max_length=100)
    div_is_active: Optional[bool] = None


class DivisionRead(SQLModel):
    div_id: int
    div_code: str
    div_name: str
    div_is_active: bool
    div_created_by: Optional[str] = None
    div_updated_by: Optional[str] = None
    div_created_at: Optional[datetime] = Field(None, description="레코드 생성 일시")
    div_updated_at: Optional[datetime] = Field(None, description="레코드 마지막 업데이트 일시")


# =============================================================================
# 2. 직위 (Position) 스키마
# =============================================================================
class PositionCreate(InputSchema):
    pos_code: str = Field(..., max_length=10)
    pos_name: str = Field(..., max_length=100)
    pos_is_active: bool = True


class PositionUpdate(InputSchema):
    not_nullable: ClassVar[Tuple[str, ...]] = ("pos_code", "pos_name")
    null_ignored: ClassVar[Tuple[str, ...]] = ("pos_is_active",)

    pos_code: Optional[str] = Field(None, max_length=10)
    pos_name: Optional[str] = Field(None, max_length=100)
    pos_is_active: Optional[bool] = None


class PositionRead(SQLModel):
    pos_id: int
    pos_code: str
    pos_name: str
    pos_is_active: bool
    pos_created_by: Optional[str] = None
    pos_updated_by: Optional[str] = None
    pos_created_at: Optional[datetime] = Field(None, description="레코드 생성 일시")
    pos_updated_at: Optional[datetime] = Field(None, description="레코드 마지막 업데이트 일시")
