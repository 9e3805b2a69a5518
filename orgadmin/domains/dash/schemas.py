# orgadmin/domains/dash/schemas.py

"""
대시보드 통계 응답 스키마입니다.
"""

from typing import List, Optional

from pydantic import BaseModel

from orgadmin.domains.org.schemas import DivisionRead, PositionRead
from orgadmin.domains.usr.schemas import UserRead


class NameCount(BaseModel):
    """차트용 (이름, 건수) 항목"""
    name: str
    count: int


class RecentUser(UserRead):
    """최근 등록 사용자 (부서, 직위 포함)"""
    division: Optional[DivisionRead] = None
    position: Optional[PositionRead] = None


class DashboardStatistics(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    total_divisions: int
    active_divisions: int
    total_positions: int
    active_positions: int
    total_roles: int
    active_roles: int
    managers_count: int
    users_by_division: List[NameCount]
    users_by_position: List[NameCount]
    recent_users: List[RecentUser]
