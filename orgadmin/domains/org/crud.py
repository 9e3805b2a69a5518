# orgadmin/domains/org/crud.py

"""
'org' 도메인 (부서, 직위)의 비동기 저장소 모듈입니다.
"""

from enum import Enum
from typing import Any, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.crud_base import CRUDBase
from orgadmin.domains.usr.models import User

from . import models as org_models
from . import schemas as org_schemas


# =============================================================================
# 1. 정렬 허용 컬럼
# =============================================================================
class DivisionSortField(str, Enum):
    DIV_ID = "div_id"
    DIV_CODE = "div_code"
    DIV_NAME = "div_name"


class PositionSortField(str, Enum):
    POS_ID = "pos_id"
    POS_CODE = "pos_code"
    POS_NAME = "pos_name"


# =============================================================================
# 2. 부서 (Division) CRUD
# =============================================================================
class CRUDDivision(CRUDBase[org_models.Division, org_schemas.DivisionCreate, org_schemas.DivisionUpdate]):
    pk_field = "div_id"
    audit_prefix = "div"
    active_field = "div_is_active"
    sort_fields = DivisionSortField
    # 상세 조회: 소속 사용자와 각 사용자의 직위
    detail_options = (
        lambda: selectinload(org_models.Division.users).selectinload(User.position),
    )

    async def count_dependents(self, db: AsyncSession, id: Any) -> int:
        """이 부서에 소속된 사용자 수"""
        statement = select(func.count()).select_from(User).where(User.u_division_id == id)
        return (await db.execute(statement)).scalar_one()

    async def user_counts(self, db: AsyncSession) -> List[Tuple[str, int]]:
        """부서별 사용자 수 (사용자가 없는 부서 포함)"""
        statement = (
            select(org_models.Division.div_name, func.count(User.u_id))
            .select_from(org_models.Division)
            .outerjoin(User, User.u_division_id == org_models.Division.div_id)
            .group_by(org_models.Division.div_id, org_models.Division.div_name)
            .order_by(org_models.Division.div_id)
        )
        result = await db.execute(statement)
        return [(name, count) for name, count in result.all()]


# =============================================================================
# 3. 직위 (Position) CRUD
# =============================================================================
class CRUDPosition(CRUDBase[org_models.Position, org_schemas.PositionCreate, org_schemas.PositionUpdate]):
    pk_field = "pos_id"
    audit_prefix = "pos"
    active_field = "pos_is_active"
    sort_fields = PositionSortField
    detail_options = (
        lambda: selectinload(org_models.Position.users).selectinload(User.division),
    )

    async def count_dependents(self, db: AsyncSession, id: Any) -> int:
        """이 직위를 가진 사용자 수"""
        statement = select(func.count()).select_from(User).where(User.u_position_id == id)
        return (await db.execute(statement)).scalar_one()

    async def user_counts(self, db: AsyncSession) -> List[Tuple[str, int]]:
        """직위별 사용자 수 (사용자가 없는 직위 포함)"""
        statement = (
            select(org_models.Position.pos_name, func.count(User.u_id))
            .select_from(org_models.Position)
            .outerjoin(User, User.u_position_id == org_models.Position.pos_id)
            .group_by(org_models.Position.pos_id, org_models.Position.pos_name)
            .order_by(org_models.Position.pos_id)
        )
        result = await db.execute(statement)
        return [(name, count) for name, count in result.all()]


division = CRUDDivision(org_models.Division)
position = CRUDPosition(org_models.Position)
