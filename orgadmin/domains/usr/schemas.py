# orgadmin/domains/usr/schemas.py

"""
'usr' 도메인 (사용자, 역할, 인증)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import os
from typing import Any, ClassVar, List, Optional, Tuple
from datetime import date, datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator
from starlette.datastructures import UploadFile

from orgadmin.core.schemas import InputSchema
from orgadmin.domains.org.schemas import DivisionRead, PositionRead

# 프로필 이미지 업로드 제한
PROFILE_IMAGE_EXTENSIONS = ("jpeg", "png", "jpg", "gif")
PROFILE_IMAGE_MAX_KB = 2048


# =============================================================================
# 1. 역할 (Role) 스키마
# =============================================================================
class RoleCreate(InputSchema):
    role_name: str = Field(..., max_length=50)
    role_level: int = Field(..., ge=0, le=100000)
    role_is_active: bool = True


class RoleUpdate(InputSchema):
    not_nullable: ClassVar[Tuple[str, ...]] = ("role_name", "role_level")
    null_ignored: ClassVar[Tuple[str, ...]] = ("role_is_active",)

    role_name: Optional[str] = Field(None, max_length=50)
    role_level: Optional[int] = Field(None, ge=0, le=100000)
    role_is_active: Optional[bool] = None


class RoleRead(SQLModel):
    role_id: int
    role_name: str
    role_level: int
    role_is_active: bool
    role_created_by: Optional[str] = None
    role_updated_by: Optional[str] = None
    role_created_at: Optional[datetime] = None
    role_updated_at: Optional[datetime] = None


class RoleListItem(RoleRead):
    """역할 목록 항목 (소속 사용자 수 포함)"""
    users_count: int = 0


# =============================================================================
# 2. 사용자 (User) 스키마
# =============================================================================
def _check_profile_image(value: Any) -> Any:
    if value is None:
        return value
    if not isinstance(value, UploadFile):
        raise ValueError("The u profile image field must be an image.")
    extension = os.path.splitext(value.filename or "")[1].lstrip(".").lower()
    if extension not in PROFILE_IMAGE_EXTENSIONS:
        raise ValueError(f"The u profile image field must be a file of type: {', '.join(PROFILE_IMAGE_EXTENSIONS)}.")
    if value.size is not None and value.size > PROFILE_IMAGE_MAX_KB * 1024:
        raise ValueError(f"The u profile image field must not be greater than {PROFILE_IMAGE_MAX_KB} kilobytes.")
    return value


class UserCreate(InputSchema):
    """사용자 생성을 위한 스키마"""
    u_employee_id: str = Field(..., max_length=20)
    u_name: str = Field(..., max_length=100)
    u_email: EmailStr
    u_password_confirmation: Optional[str] = None
    u_password: str = Field(..., min_length=8)
    u_phone: Optional[str] = Field(None, max_length=20)
    u_address: Optional[str] = None
    u_birthdate: Optional[date] = None
    u_join_date: date
    u_profile_image: Optional[Any] = Field(None, description="업로드 파일 (multipart)")
    u_division_id: Optional[int] = None
    u_position_id: Optional[int] = None
    u_is_manager: bool = False
    u_manager_id: Optional[int] = None
    u_is_active: bool = True
    roles: Optional[List[int]] = None

    # 생성 시에는 비밀번호 확인 값이 반드시 일치해야 합니다.
    confirmation_required: ClassVar[bool] = True

    @field_validator("u_email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        if value and len(value) > 100:
            raise ValueError("The u email field must not be greater than 100 characters.")
        return value.lower() if value else value

    @field_validator("u_password")
    @classmethod
    def password_confirmed(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        confirmation = info.data.get("u_password_confirmation")
        if value is None:
            return value
        if (cls.confirmation_required or confirmation is not None) and confirmation != value:
            raise ValueError("The u password field confirmation does not match.")
        return value

    @field_validator("u_profile_image")
    @classmethod
    def profile_image(cls, value: Any) -> Any:
        return _check_profile_image(value)


class UserUpdate(UserCreate):
    """사용자 정보 수정을 위한 스키마 (전달된 필드만 반영)"""
    not_nullable: ClassVar[Tuple[str, ...]] = ("u_employee_id", "u_name", "u_email", "u_join_date")
    null_ignored: ClassVar[Tuple[str, ...]] = (
        "u_password", "u_password_confirmation", "u_profile_image", "u_is_manager", "u_is_active", "roles",
    )
    confirmation_required: ClassVar[bool] = False

    u_employee_id: Optional[str] = Field(None, max_length=20)
    u_name: Optional[str] = Field(None, max_length=100)
    u_email: Optional[EmailStr] = None
    u_password: Optional[str] = Field(None, min_length=8)
    u_join_date: Optional[date] = None
    u_is_manager: Optional[bool] = None
    u_is_active: Optional[bool] = None


class UserRead(SQLModel):
    """
    사용자 정보 조회를 위한 기본 스키마.
    비밀번호 해시값 등 민감한 정보는 제외됩니다.
    """
    u_id: int
    u_employee_id: str
    u_name: str
    u_email: str
    u_phone: Optional[str] = None
    u_address: Optional[str] = None
    u_birthdate: Optional[date] = None
    u_join_date: date
    u_profile_image: Optional[str] = None
    u_division_id: Optional[int] = None
    u_position_id: Optional[int] = None
    u_is_manager: bool
    u_manager_id: Optional[int] = None
    u_is_active: bool
    u_created_by: Optional[str] = None
    u_updated_by: Optional[str] = None
    u_created_at: Optional[datetime] = None
    u_updated_at: Optional[datetime] = None


class UserReadWithDetails(UserRead):
    """사용자 조회 시 부서, 직위, 역할 정보까지 함께 반환하는 스키마"""
    division: Optional[DivisionRead] = None
    position: Optional[PositionRead] = None
    roles: List[RoleRead] = []


class UserReadFull(UserReadWithDetails):
    """단건 조회용: 관리자 정보 포함"""
    manager: Optional[UserRead] = None


class UserReadWithPosition(UserRead):
    position: Optional[PositionRead] = None


class UserReadWithDivision(UserRead):
    division: Optional[DivisionRead] = None


# =============================================================================
# 3. 상세 조회 스키마 (소속 사용자 포함)
# =============================================================================
class RoleReadWithUsers(RoleRead):
    users: List[UserRead] = []


class DivisionReadWithUsers(DivisionRead):
    users: List[UserReadWithPosition] = []


class PositionReadWithUsers(PositionRead):
    users: List[UserReadWithDivision] = []


# =============================================================================
# 4. 인증 (Auth) 스키마
# =============================================================================
class LoginRequest(InputSchema):
    """로그인 요청 본문"""
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class LoginData(BaseModel):
    """로그인 성공 응답"""
    user: UserReadWithDetails
    roles: List[str]
    token: str
    token_type: str = "Bearer"
