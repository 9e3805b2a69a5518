# orgadmin/domains/org/models.py

"""
'org' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

login_divisions, login_positions 테이블에 대한 SQLModel 클래스를 포함합니다.
컬럼 이름은 API 응답 필드 이름과 동일하며 엔티티별 접두어(div_, pos_)를 사용합니다.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from orgadmin.core.database_base import table_args

if TYPE_CHECKING:
    from orgadmin.domains.usr.models import User


# =============================================================================
# 1. login_divisions 테이블 모델
# =============================================================================
class DivisionBase(SQLModel):
    """
    login_divisions 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    div_id: Optional[int] = Field(default=None, primary_key=True, description="부서 고유 ID")
    div_code: str = Field(max_length=10, sa_column_kwargs={"unique": True}, description="부서 코드 (예: ENG)")
    div_name: str = Field(max_length=100, description="부서명")
    div_is_active: bool = Field(default=True, description="활성 여부")

    div_created_by: Optional[str] = Field(default=None, max_length=50, description="생성자 (사용자 ID 또는 'system')")
    div_updated_by: Optional[str] = Field(default=None, max_length=50, description="최종 수정자")
    div_created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    div_updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="레코드 마지막 업데이트 일시"
    )


class Division(DivisionBase, table=True):
    """
    login_divisions 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "login_divisions"
    __table_args__ = table_args()

    users: List["User"] = Relationship(
        back_populates="division",
        sa_relationship_kwargs={"foreign_keys": "User.u_division_id", "passive_deletes": "all"}
    )


# =============================================================================
# 2. login_positions 테이블 모델
# =============================================================================
class PositionBase(SQLModel):
    """
    login_positions 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    pos_id: Optional[int] = Field(default=None, primary_key=True, description="직위 고유 ID")
    pos_code: str = Field(max_length=10, sa_column_kwargs={"unique": True}, description="직위 코드 (예: MGR)")
    pos_name: str = Field(max_length=100, description="직위명")
    pos_is_active: bool = Field(default=True, description="활성 여부")

    pos_created_by: Optional[str] = Field(default=None, max_length=50, description="생성자 (사용자 ID 또는 'system')")
    pos_updated_by: Optional[str] = Field(default=None, max_length=50, description="최종 수정자")
    pos_created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    pos_updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="레코드 마지막 업데이트 일시"
    )


class Position(PositionBase, table=True):
    """
    login_positions 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "login_positions"
    __table_args__ = table_args()

    users: List["User"] = Relationship(
        back_populates="position",
        sa_relationship_kwargs={"foreign_keys": "User.u_position_id", "passive_deletes": "all"}
    )
