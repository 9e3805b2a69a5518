# orgadmin/domains/org/routers.py

"""
'org' 도메인 (부서 및 직위 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 엔드포인트는 Bearer 토큰이 필요합니다.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.database import get_session
from orgadmin.core import dependencies as deps
from orgadmin.core.exceptions import envelope
from orgadmin.core.resource import ListParams, list_params
from orgadmin.core.schemas import Envelope, PageData
from orgadmin.domains.usr import schemas as usr_schemas

from . import schemas as org_schemas
from . import services as org_services


router = APIRouter(
    tags=["Division & Position Management (부서 및 직위 관리)"],
    dependencies=[Depends(deps.get_auth_context)],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 부서 (Division) 관리 엔드포인트
# =============================================================================
@router.get("/divisions/all", response_model=Envelope[List[org_schemas.DivisionRead]], summary="활성 부서 전체 조회")
async def read_active_divisions(db: AsyncSession = Depends(get_session)):
    db_divisions = await org_services.divisions.list_all_active(db)
    return envelope(data=[org_schemas.DivisionRead.model_validate(d) for d in db_divisions])


@router.get("/divisions", response_model=Envelope[PageData[org_schemas.DivisionRead]], summary="부서 목록 조회")
async def read_divisions(
    params: ListParams = Depends(list_params),
    db: AsyncSession = Depends(get_session),
):
    page = await org_services.divisions.list(db, params)
    return envelope(data=page.to_dict(org_schemas.DivisionRead.model_validate))


@router.post(
    "/divisions",
    response_model=Envelope[org_schemas.DivisionRead],
    status_code=status.HTTP_201_CREATED,
    summary="새 부서 생성",
)
async def create_division(
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_division = await org_services.divisions.create(db, payload, actor=actor)
    return envelope(
        message=org_services.divisions.message("created"),
        data=org_schemas.DivisionRead.model_validate(db_division),
    )


@router.get(
    "/divisions/{division_id}",
    response_model=Envelope[usr_schemas.DivisionReadWithUsers],
    summary="특정 부서 조회 (소속 사용자 및 직위 포함)",
)
async def read_division(division_id: int, db: AsyncSession = Depends(get_session)):
    db_division = await org_services.divisions.get(db, division_id)
    return envelope(data=usr_schemas.DivisionReadWithUsers.model_validate(db_division))


@router.put("/divisions/{division_id}", response_model=Envelope[org_schemas.DivisionRead], summary="부서 수정")
async def update_division(
    division_id: int,
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_division = await org_services.divisions.update(db, division_id, payload, actor=actor)
    return envelope(
        message=org_services.divisions.message("updated"),
        data=org_schemas.DivisionRead.model_validate(db_division),
    )


@router.delete("/divisions/{division_id}", response_model=Envelope[Any], summary="부서 삭제 (소속 사용자가 없을 때만)")
async def delete_division(division_id: int, db: AsyncSession = Depends(get_session)):
    await org_services.divisions.delete(db, division_id)
    return envelope(message=org_services.divisions.message("deleted"))


# =============================================================================
# 2. 직위 (Position) 관리 엔드포인트
# =============================================================================
@router.get("/positions/all", response_model=Envelope[List[org_schemas.PositionRead]], summary="활성 직위 전체 조회")
async def read_active_positions(db: AsyncSession = Depends(get_session)):
    db_positions = await org_services.positions.list_all_active(db)
    return envelope(data=[org_schemas.PositionRead.model_validate(p) for p in db_positions])


@router.get("/positions", response_model=Envelope[PageData[org_schemas.PositionRead]], summary="직위 목록 조회")
async def read_positions(
    params: ListParams = Depends(list_params),
    db: AsyncSession = Depends(get_session),
):
    page = await org_services.positions.list(db, params)
    return envelope(data=page.to_dict(org_schemas.PositionRead.model_validate))


@router.post(
    "/positions",
    response_model=Envelope[org_schemas.PositionRead],
    status_code=status.HTTP_201_CREATED,
    summary="새 직위 생성",
)
async def create_position(
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_position = await org_services.positions.create(db, payload, actor=actor)
    return envelope(
        message=org_services.positions.message("created"),
        data=org_schemas.PositionRead.model_validate(db_position),
    )


@router.get(
    "/positions/{position_id}",
    response_model=Envelope[usr_schemas.PositionReadWithUsers],
    summary="특정 직위 조회 (소속 사용자 및 부서 포함)",
)
async def read_position(position_id: int, db: AsyncSession = Depends(get_session)):
    db_position = await org_services.positions.get(db, position_id)
    return envelope(data=usr_schemas.PositionReadWithUsers.model_validate(db_position))


@router.put("/positions/{position_id}", response_model=Envelope[org_schemas.PositionRead], summary="직위 수정")
async def update_position(
    position_id: int,
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_position = await org_services.positions.update(db, position_id, payload, actor=actor)
    return envelope(
        message=org_services.positions.message("updated"),
        data=org_schemas.PositionRead.model_validate(db_position),
    )


@router.delete("/positions/{position_id}", response_model=Envelope[Any], summary="직위 삭제 (소속 사용자가 없을 때만)")
async def delete_position(position_id: int, db: AsyncSession = Depends(get_session)):
    await org_services.positions.delete(db, position_id)
    return envelope(message=org_services.positions.message("deleted"))
