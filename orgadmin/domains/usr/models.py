# orgadmin/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 사용자(login_users), 역할(login_roles), 사용자-역할 연결(login_user_roles),
인증 토큰(personal_access_tokens) 테이블에 대한 SQLModel 클래스를 포함합니다.
각 클래스는 테이블 구조와 컬럼을 Python 객체로 매핑하며,
SQLModel의 Field 및 Relationship을 사용하여 제약 조건과 관계를 정의합니다.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import date, datetime, UTC
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from orgadmin.core.database_base import table_args, fk

# 다른 도메인의 모델을 참조해야 할 경우
# TYPE_CHECKING을 사용하여 순환 임포트 문제를 방지합니다.
if TYPE_CHECKING:
    from orgadmin.domains.org.models import Division, Position


# =============================================================================
# 1. login_user_roles 연결 테이블 모델
# =============================================================================
class UserRole(SQLModel, table=True):
    """
    사용자와 역할의 다대다 관계를 잇는 연결 테이블입니다.
    (사용자, 역할) 쌍의 존재 외에 별도의 생명주기는 없습니다.
    """
    __tablename__ = "login_user_roles"
    __table_args__ = table_args()

    ur_user_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey(fk("login_users.u_id"), ondelete="CASCADE"), primary_key=True
        ),
        description="사용자 ID (FK)"
    )
    ur_role_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey(fk("login_roles.role_id"), ondelete="RESTRICT"), primary_key=True
        ),
        description="역할 ID (FK)"
    )
    ur_created_by: Optional[str] = Field(default=None, max_length=50, description="연결 생성자")
    ur_created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="연결 생성 일시"
    )


# =============================================================================
# 2. login_roles 테이블 모델
# =============================================================================
class RoleBase(SQLModel):
    """
    login_roles 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    role_id: Optional[int] = Field(default=None, primary_key=True, description="역할 고유 ID")
    role_name: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="역할명")
    role_level: int = Field(default=0, description="권한 수준 (0 ~ 100000)")
    role_is_active: bool = Field(default=True, description="활성 여부")

    role_created_by: Optional[str] = Field(default=None, max_length=50, description="생성자")
    role_updated_by: Optional[str] = Field(default=None, max_length=50, description="최종 수정자")
    role_created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    role_updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="레코드 마지막 업데이트 일시"
    )


class Role(RoleBase, table=True):
    """
    login_roles 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "login_roles"
    __table_args__ = table_args()

    # 연결 행은 ORM이 지우지 않습니다. 사용자가 남아 있으면 DB의 RESTRICT 제약이 삭제를 막습니다.
    users: List["User"] = Relationship(
        back_populates="roles",
        link_model=UserRole,
        sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 3. login_users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    login_users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    u_id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    u_employee_id: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="사번")
    u_name: str = Field(max_length=100, description="이름")
    # 이메일은 항상 소문자로 저장합니다 (대소문자 구분 없는 유일성).
    u_email: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="이메일")
    u_password: str = Field(max_length=255, description="해싱된 비밀번호")
    u_phone: Optional[str] = Field(default=None, max_length=20, description="전화번호")
    u_address: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True), description="주소")
    u_birthdate: Optional[date] = Field(default=None, description="생년월일")
    u_join_date: date = Field(description="입사일")
    u_profile_image: Optional[str] = Field(default=None, max_length=255, description="프로필 이미지 저장 경로 (UPLOAD_DIR 기준 상대 경로)")
    u_division_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer, ForeignKey(fk("login_divisions.div_id"), onupdate="CASCADE", ondelete="RESTRICT"), nullable=True
        ),
        description="소속 부서 ID (FK)"
    )
    u_position_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer, ForeignKey(fk("login_positions.pos_id"), onupdate="CASCADE", ondelete="RESTRICT"), nullable=True
        ),
        description="직위 ID (FK)"
    )
    u_is_manager: bool = Field(default=False, description="관리자(매니저) 여부")
    # 자기 참조 관리자. ID만 저장하고 필요할 때 관계로 해석합니다 (순환 검사 없음).
    u_manager_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey(fk("login_users.u_id"), ondelete="SET NULL"), nullable=True),
        description="관리자 사용자 ID (FK, 자기 참조)"
    )
    u_is_active: bool = Field(default=True, description="계정 활성 여부")

    u_created_by: Optional[str] = Field(default=None, max_length=50, description="생성자")
    u_updated_by: Optional[str] = Field(default=None, max_length=50, description="최종 수정자")
    u_created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    u_updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="레코드 마지막 업데이트 일시"
    )


class User(UserBase, table=True):
    """
    login_users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "login_users"
    __table_args__ = table_args()

    # 관계 정의:
    division: Optional["Division"] = Relationship(
        back_populates="users",
        sa_relationship_kwargs={"foreign_keys": "User.u_division_id"}
    )
    position: Optional["Position"] = Relationship(
        back_populates="users",
        sa_relationship_kwargs={"foreign_keys": "User.u_position_id"}
    )
    manager: Optional["User"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "User.u_manager_id", "remote_side": "User.u_id"}
    )
    roles: List["Role"] = Relationship(back_populates="users", link_model=UserRole)


# =============================================================================
# 4. personal_access_tokens 테이블 모델
# =============================================================================
class AuthToken(SQLModel, table=True):
    """
    발급된 Bearer 토큰의 레코드입니다.
    토큰 문자열 자체는 저장하지 않고 고유 식별자(jti)만 보관하며,
    레코드가 삭제되면(로그아웃) 해당 토큰은 더 이상 유효하지 않습니다.
    """
    __tablename__ = "personal_access_tokens"
    __table_args__ = table_args()

    id: Optional[int] = Field(default=None, primary_key=True, description="토큰 레코드 ID")
    user_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey(fk("login_users.u_id"), ondelete="CASCADE"), nullable=False, index=True
        ),
        description="토큰 소유 사용자 ID (FK)"
    )
    name: str = Field(default="auth_token", max_length=100, description="토큰 이름")
    jti: str = Field(max_length=64, sa_column_kwargs={"unique": True}, description="토큰 고유 식별자")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="발급 일시"
    )
    last_used_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="마지막 사용 일시"
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="만료 일시 (없으면 로그아웃 시까지 유효)"
    )
