# orgadmin/domains/dash/routers.py

"""
대시보드 통계 API 엔드포인트입니다. Bearer 토큰이 필요합니다.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.database import get_session
from orgadmin.core import dependencies as deps
from orgadmin.core.exceptions import envelope
from orgadmin.core.schemas import Envelope

from . import schemas as dash_schemas
from . import services as dash_services

router = APIRouter(
    tags=["Dashboard (대시보드)"],
    dependencies=[Depends(deps.get_auth_context)],
)


@router.get(
    "/dashboard/statistics",
    response_model=Envelope[dash_schemas.DashboardStatistics],
    summary="대시보드 통계 조회",
)
async def read_statistics(db: AsyncSession = Depends(get_session)):
    statistics = await dash_services.get_statistics(db)
    return envelope(data=statistics)
