# orgadmin/domains/dash/services.py

"""
대시보드 통계 집계 서비스입니다.
자체 상태나 캐시 없이 호출될 때마다 각 저장소의 집계 쿼리로 다시 계산합니다.
"""

from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.domains.org import crud as org_crud
from orgadmin.domains.usr import crud as usr_crud

from . import schemas as dash_schemas

RECENT_USERS_LIMIT = 5


async def get_statistics(db: AsyncSession) -> dash_schemas.DashboardStatistics:
    total_users = await usr_crud.user.count(db)
    active_users = await usr_crud.user.count(db, u_is_active=True)

    return dash_schemas.DashboardStatistics(
        total_users=total_users,
        active_users=active_users,
        inactive_users=await usr_crud.user.count(db, u_is_active=False),
        total_divisions=await org_crud.division.count(db),
        active_divisions=await org_crud.division.count(db, div_is_active=True),
        total_positions=await org_crud.position.count(db),
        active_positions=await org_crud.position.count(db, pos_is_active=True),
        total_roles=await usr_crud.role.count(db),
        active_roles=await usr_crud.role.count(db, role_is_active=True),
        managers_count=await usr_crud.user.count(db, u_is_manager=True),
        users_by_division=[
            dash_schemas.NameCount(name=name, count=count)
            for name, count in await org_crud.division.user_counts(db)
        ],
        users_by_position=[
            dash_schemas.NameCount(name=name, count=count)
            for name, count in await org_crud.position.user_counts(db)
        ],
        recent_users=[
            dash_schemas.RecentUser.model_validate(u)
            for u in await usr_crud.user.get_recent(db, limit=RECENT_USERS_LIMIT)
        ],
    )
