# orgadmin/domains/usr/crud.py

"""
'usr' 도메인 (사용자, 역할, 인증 토큰)의 비동기 저장소 모듈입니다.
사용자-역할 연결(attach/sync/detach)과 토큰 발급/폐기 로직을 포함합니다.
"""

import logging
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import delete, func
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.crud_base import CRUDBase, resolve_actor
from orgadmin.core.security import create_access_token, new_token_id, token_expiry

from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 정렬 허용 컬럼
# =============================================================================
class UserSortField(str, Enum):
    U_EMPLOYEE_ID = "u_employee_id"
    U_NAME = "u_name"
    U_EMAIL = "u_email"
    U_JOIN_DATE = "u_join_date"


class RoleSortField(str, Enum):
    ROLE_ID = "role_id"
    ROLE_NAME = "role_name"
    ROLE_LEVEL = "role_level"


# =============================================================================
# 2. 사용자 (User) CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    pk_field = "u_id"
    audit_prefix = "u"
    active_field = "u_is_active"
    sort_fields = UserSortField
    search_fields = ("u_name", "u_email", "u_employee_id")
    list_options = (
        lambda: selectinload(usr_models.User.division),
        lambda: selectinload(usr_models.User.position),
        lambda: selectinload(usr_models.User.roles),
    )
    detail_options = list_options + (
        lambda: selectinload(usr_models.User.manager),
    )

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 사용자를 조회합니다 (대소문자 구분 없음)."""
        statement = select(usr_models.User).where(func.lower(usr_models.User.u_email) == email.lower())
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_recent(self, db: AsyncSession, *, limit: int = 5) -> List[usr_models.User]:
        """최근 생성된 사용자 (부서, 직위 포함)"""
        statement = (
            select(usr_models.User)
            .options(selectinload(usr_models.User.division), selectinload(usr_models.User.position))
            .order_by(usr_models.User.u_created_at.desc(), usr_models.User.u_id.desc())
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    # --- 사용자-역할 연결 ---
    async def role_ids(self, db: AsyncSession, *, user_id: int) -> List[int]:
        statement = select(usr_models.UserRole.ur_role_id).where(usr_models.UserRole.ur_user_id == user_id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def attach_roles(
        self, db: AsyncSession, *, user_id: int, role_ids: Iterable[int], actor: Optional[Any] = None
    ) -> List[int]:
        """
        역할을 연결합니다. 이미 연결된 역할은 건너뜁니다.
        flush만 수행하므로 커밋은 호출자가 결정합니다.
        """
        existing = set(await self.role_ids(db, user_id=user_id))
        created_by = resolve_actor(actor)
        added: List[int] = []
        for role_id in dict.fromkeys(role_ids):
            if role_id in existing:
                continue
            db.add(usr_models.UserRole(ur_user_id=user_id, ur_role_id=role_id, ur_created_by=created_by))
            added.append(role_id)
        if added:
            await db.flush()
        return added

    async def sync_roles(
        self, db: AsyncSession, *, user_id: int, role_ids: Iterable[int], actor: Optional[Any] = None
    ) -> Dict[str, List[int]]:
        """연결된 역할을 주어진 목록과 정확히 일치시킵니다."""
        wanted = list(dict.fromkeys(role_ids))
        existing = await self.role_ids(db, user_id=user_id)
        detached = [role_id for role_id in existing if role_id not in wanted]
        if detached:
            await db.execute(
                delete(usr_models.UserRole).where(
                    usr_models.UserRole.ur_user_id == user_id,
                    usr_models.UserRole.ur_role_id.in_(detached),
                )
            )
        attached = await self.attach_roles(db, user_id=user_id, role_ids=wanted, actor=actor)
        return {"attached": attached, "detached": detached}

    async def detach_roles(self, db: AsyncSession, *, user_id: int) -> None:
        """사용자의 모든 역할 연결을 제거합니다."""
        await db.execute(delete(usr_models.UserRole).where(usr_models.UserRole.ur_user_id == user_id))


# =============================================================================
# 3. 역할 (Role) CRUD
# =============================================================================
class CRUDRole(CRUDBase[usr_models.Role, usr_schemas.RoleCreate, usr_schemas.RoleUpdate]):
    pk_field = "role_id"
    audit_prefix = "role"
    active_field = "role_is_active"
    sort_fields = RoleSortField
    detail_options = (lambda: selectinload(usr_models.Role.users),)

    async def user_counts(self, db: AsyncSession, role_ids: Iterable[int]) -> Dict[int, int]:
        ids = list(role_ids)
        if not ids:
            return {}
        statement = (
            select(usr_models.UserRole.ur_role_id, func.count())
            .where(usr_models.UserRole.ur_role_id.in_(ids))
            .group_by(usr_models.UserRole.ur_role_id)
        )
        result = await db.execute(statement)
        return {role_id: count for role_id, count in result.all()}

    async def _fetch_page_items(self, db: AsyncSession, statement) -> List[Any]:
        # 목록 항목마다 소속 사용자 수(users_count)를 함께 반환합니다.
        roles = await super()._fetch_page_items(db, statement)
        counts = await self.user_counts(db, (role.role_id for role in roles))
        return [
            usr_schemas.RoleListItem(**role.model_dump(), users_count=counts.get(role.role_id, 0))
            for role in roles
        ]

    async def count_dependents(self, db: AsyncSession, id: Any) -> int:
        """이 역할이 연결된 사용자 수"""
        statement = select(func.count()).select_from(usr_models.UserRole).where(usr_models.UserRole.ur_role_id == id)
        return (await db.execute(statement)).scalar_one()


# =============================================================================
# 4. 인증 토큰 (AuthToken) CRUD
# =============================================================================
class CRUDAuthToken(CRUDBase[usr_models.AuthToken, BaseModel, BaseModel]):

    async def get_by_jti(self, db: AsyncSession, *, jti: str) -> Optional[usr_models.AuthToken]:
        return await self.get_by_attribute(db, attribute="jti", value=jti)

    async def issue(
        self, db: AsyncSession, *, user_id: int, name: str = "auth_token"
    ) -> Tuple[usr_models.AuthToken, str]:
        """
        사용자에게 새 토큰을 발급합니다.
        레코드를 먼저 저장한 뒤, 그 jti를 담은 서명된 토큰 문자열을 반환합니다.
        """
        jti = new_token_id()
        expires_at = token_expiry()
        record = await self.create(
            db, obj_in={"user_id": user_id, "name": name, "jti": jti, "expires_at": expires_at}
        )
        token = create_access_token(subject=user_id, jti=jti, expires_at=expires_at)
        return record, token

    async def touch(self, db: AsyncSession, *, record: usr_models.AuthToken) -> None:
        """마지막 사용 시각을 갱신합니다."""
        record.last_used_at = datetime.now(UTC)
        db.add(record)
        await db.commit()

    async def revoke(self, db: AsyncSession, *, record: usr_models.AuthToken) -> None:
        await self.delete(db, db_obj=record)
        logger.info("토큰 폐기: user_id=%s, jti=%s", record.user_id, record.jti)

    async def revoke_all(self, db: AsyncSession, *, user_id: int) -> None:
        """사용자의 모든 토큰을 삭제합니다 (flush 전용, 커밋은 호출자가 결정)."""
        await db.execute(delete(usr_models.AuthToken).where(usr_models.AuthToken.user_id == user_id))


user = CRUDUser(usr_models.User)
role = CRUDRole(usr_models.Role)
auth_token = CRUDAuthToken(usr_models.AuthToken)
