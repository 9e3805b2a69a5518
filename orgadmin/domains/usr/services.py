# orgadmin/domains/usr/services.py

"""
'usr' 도메인의 서비스 계층입니다.

1. 인증 세션 관리: 로그인(자격 증명 확인 및 토큰 발급), 현재 사용자 확인, 로그아웃(토큰 폐기)
   상태 전이: 익명 → 인증됨(토큰) → 익명 (로그아웃 또는 토큰 폐기)
2. 사용자/역할 리소스: 일반 CRUD 리소스에 사용자 고유의 부수 효과를 더합니다.
   - 비밀번호 해싱 (새 값이 전달된 경우에만)
   - 프로필 이미지 저장 및 교체 시 이전 파일 삭제
   - 역할 연결 (생성 시 attach, 수정 시 sync, 삭제 시 detach)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlalchemy import update
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.exceptions import UnauthorizedError
from orgadmin.core.resource import CRUDResource
from orgadmin.core.security import decode_access_token, get_password_hash, verify_password
from orgadmin.utils import files

from . import crud as usr_crud
from . import models as usr_models
from . import rules as usr_rules
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)

# 사용자 없음, 비활성 사용자, 비밀번호 불일치를 구분하지 않는 단일 메시지
INVALID_CREDENTIALS = "Invalid credentials"


# =============================================================================
# 1. 인증 세션 관리
# =============================================================================
@dataclass
class AuthContext:
    """인증된 요청의 컨텍스트 (제시된 토큰 레코드와 그 소유 사용자)"""
    token: usr_models.AuthToken
    user: usr_models.User

    @property
    def actor(self) -> str:
        return str(self.user.u_id)


async def login(db: AsyncSession, *, credentials: usr_schemas.LoginRequest) -> Dict[str, Any]:
    """
    이메일/비밀번호를 확인하고 새 토큰을 발급합니다.
    이메일은 스키마에서 이미 소문자로 정규화되어 있습니다.
    """
    db_user = await usr_crud.user.get_by_email(db, email=credentials.email)
    if db_user is None or not db_user.u_is_active or not verify_password(credentials.password, db_user.u_password):
        logger.info("로그인 실패: %s", credentials.email)
        raise UnauthorizedError(INVALID_CREDENTIALS)

    _, token = await usr_crud.auth_token.issue(db, user_id=db_user.u_id)
    db_user = await usr_crud.user.get(db, db_user.u_id, with_relations=True)
    logger.info("로그인 성공: user_id=%s", db_user.u_id)
    return {
        "user": usr_schemas.UserReadWithDetails.model_validate(db_user),
        "roles": [r.role_name for r in db_user.roles],
        "token": token,
        "token_type": "Bearer",
    }


async def resolve_token(db: AsyncSession, *, token: Optional[str]) -> AuthContext:
    """
    Bearer 토큰을 소유 사용자로 해석합니다.
    토큰이 없거나, 서명/만료가 잘못되었거나, 폐기되었거나, 사용자가 비활성이면 UnauthorizedError.
    """
    if not token:
        raise UnauthorizedError()
    payload = decode_access_token(token)

    record = await usr_crud.auth_token.get_by_jti(db, jti=payload["jti"])
    if record is None or str(record.user_id) != str(payload["sub"]):
        raise UnauthorizedError()

    db_user = await usr_crud.user.get(db, record.user_id, with_relations=True)
    if db_user is None or not db_user.u_is_active:
        raise UnauthorizedError()

    await usr_crud.auth_token.touch(db, record=record)
    return AuthContext(token=record, user=db_user)


async def logout(db: AsyncSession, *, context: AuthContext) -> None:
    """제시된 토큰 하나만 폐기합니다 (다른 기기의 토큰은 유지)."""
    await usr_crud.auth_token.revoke(db, record=context.token)


# =============================================================================
# 2. 사용자 / 역할 리소스
# =============================================================================
class UserResource(CRUDResource[usr_models.User]):

    async def prepare(
        self, db: AsyncSession, obj_in: BaseModel, *, db_obj: Optional[usr_models.User] = None
    ) -> Dict[str, Any]:
        data = obj_in.model_dump(
            exclude_unset=db_obj is not None,
            exclude={"u_password_confirmation", "u_profile_image", "roles"},
        )
        if data.get("u_password"):
            data["u_password"] = get_password_hash(data["u_password"])
        else:
            data.pop("u_password", None)

        # 파일은 커밋이 끝난 뒤에 저장하고, 여기서는 저장될 경로만 기록합니다.
        upload = getattr(obj_in, "u_profile_image", None)
        if upload is not None:
            data["u_profile_image"] = files.profile_image_path(upload)
        return data

    async def after_write(
        self, db: AsyncSession, db_obj: usr_models.User, obj_in: BaseModel, *, actor: str, creating: bool
    ) -> None:
        role_ids = getattr(obj_in, "roles", None)
        if role_ids is None:
            return
        if creating:
            await usr_crud.user.attach_roles(db, user_id=db_obj.u_id, role_ids=role_ids, actor=actor)
        else:
            changes = await usr_crud.user.sync_roles(db, user_id=db_obj.u_id, role_ids=role_ids, actor=actor)
            logger.debug("사용자 %s 역할 동기화: %s", db_obj.u_id, changes)

    async def after_commit(
        self, db_obj: usr_models.User, obj_in: BaseModel, *, previous: Optional[Dict[str, Any]] = None
    ) -> None:
        upload = getattr(obj_in, "u_profile_image", None)
        if upload is not None:
            await files.save_profile_image(upload)

        # 새 프로필 이미지로 교체된 경우에만 이전 파일을 삭제합니다.
        if not previous:
            return
        old_image = previous.get("u_profile_image")
        if old_image and old_image != db_obj.u_profile_image:
            await files.remove_stored_file(old_image)

    async def before_delete(self, db: AsyncSession, db_obj: usr_models.User) -> None:
        await usr_crud.user.detach_roles(db, user_id=db_obj.u_id)
        await usr_crud.auth_token.revoke_all(db, user_id=db_obj.u_id)
        await db.execute(
            update(usr_models.User)
            .where(usr_models.User.u_manager_id == db_obj.u_id)
            .values(u_manager_id=None)
        )
        # 이미 로딩된 역할 컬렉션이 있다면 연결 행이 이중 삭제되지 않도록 만료시킵니다.
        db.expire(db_obj, ["roles"])


users = UserResource(
    usr_crud.user,
    label="User",
    create_rules=usr_rules.user_create,
    update_rules=usr_rules.user_update,
)

roles = CRUDResource(
    usr_crud.role,
    label="Role",
    create_rules=usr_rules.role_create,
    update_rules=usr_rules.role_update,
)
