# orgadmin/domains/usr/routers.py

"""
'usr' 도메인 (인증, 사용자, 역할 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

- /login           : 인증 불필요
- /me, /logout     : Bearer 토큰 필요
- /users, /roles   : Bearer 토큰 필요 (CRUD)
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.database import get_session
from orgadmin.core import dependencies as deps
from orgadmin.core.exceptions import envelope
from orgadmin.core.resource import ListParams, list_params
from orgadmin.core.schemas import Envelope, PageData

from . import schemas as usr_schemas
from . import services as usr_services


# 인증이 필요 없는 라우터 (로그인)
auth_router = APIRouter(tags=["Authentication (인증)"])

# Bearer 토큰이 필요한 라우터. 의존성 결과는 요청 단위로 캐시되므로
# 라우트에서 deps.get_actor 등을 다시 선언해도 토큰은 한 번만 확인됩니다.
router = APIRouter(
    tags=["User & Role Management (사용자 및 역할 관리)"],
    dependencies=[Depends(deps.get_auth_context)],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================
@auth_router.post("/login", response_model=Envelope[usr_schemas.LoginData], summary="로그인 (Bearer 토큰 발급)")
async def login(
    credentials: usr_schemas.LoginRequest,
    db: AsyncSession = Depends(get_session),
):
    data = await usr_services.login(db, credentials=credentials)
    return envelope(message="Login successful", data=data)


@router.get("/me", response_model=Envelope[usr_schemas.UserReadWithDetails], summary="현재 사용자 정보 조회")
async def read_me(context: usr_services.AuthContext = Depends(deps.get_auth_context)):
    return envelope(data=usr_schemas.UserReadWithDetails.model_validate(context.user))


@router.post("/logout", response_model=Envelope[Any], summary="로그아웃 (현재 토큰 폐기)")
async def logout(
    context: usr_services.AuthContext = Depends(deps.get_auth_context),
    db: AsyncSession = Depends(get_session),
):
    await usr_services.logout(db, context=context)
    return envelope(message="Successfully logged out")


# =============================================================================
# 2. 사용자 (User) 관리 엔드포인트
# =============================================================================
@router.get("/users", response_model=Envelope[PageData[usr_schemas.UserReadWithDetails]], summary="사용자 목록 조회")
async def read_users(
    params: ListParams = Depends(list_params),
    db: AsyncSession = Depends(get_session),
):
    """
    사용자 목록을 검색/정렬/페이징하여 조회합니다.
    search는 이름, 이메일, 사번에 대해 대소문자 구분 없이 부분 일치로 적용됩니다.
    """
    page = await usr_services.users.list(db, params)
    return envelope(data=page.to_dict(usr_schemas.UserReadWithDetails.model_validate))


@router.post(
    "/users",
    response_model=Envelope[usr_schemas.UserReadWithDetails],
    status_code=status.HTTP_201_CREATED,
    summary="새 사용자 생성 (JSON 또는 multipart/form-data)",
)
async def create_user(
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_user = await usr_services.users.create(db, payload, actor=actor)
    return envelope(
        message=usr_services.users.message("created"),
        data=usr_schemas.UserReadWithDetails.model_validate(db_user),
    )


@router.get("/users/{user_id}", response_model=Envelope[usr_schemas.UserReadFull], summary="특정 사용자 조회")
async def read_user(user_id: int, db: AsyncSession = Depends(get_session)):
    db_user = await usr_services.users.get(db, user_id)
    return envelope(data=usr_schemas.UserReadFull.model_validate(db_user))


@router.put("/users/{user_id}", response_model=Envelope[usr_schemas.UserReadWithDetails], summary="사용자 정보 수정")
async def update_user(
    user_id: int,
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_user = await usr_services.users.update(db, user_id, payload, actor=actor)
    return envelope(
        message=usr_services.users.message("updated"),
        data=usr_schemas.UserReadWithDetails.model_validate(db_user),
    )


@router.delete("/users/{user_id}", response_model=Envelope[Any], summary="사용자 삭제")
async def delete_user(user_id: int, db: AsyncSession = Depends(get_session)):
    await usr_services.users.delete(db, user_id)
    return envelope(message=usr_services.users.message("deleted"))


# =============================================================================
# 3. 역할 (Role) 관리 엔드포인트
# =============================================================================
@router.get("/roles/all", response_model=Envelope[List[usr_schemas.RoleRead]], summary="활성 역할 전체 조회")
async def read_active_roles(db: AsyncSession = Depends(get_session)):
    db_roles = await usr_services.roles.list_all_active(db)
    return envelope(data=[usr_schemas.RoleRead.model_validate(r) for r in db_roles])


@router.get("/roles", response_model=Envelope[PageData[usr_schemas.RoleListItem]], summary="역할 목록 조회")
async def read_roles(
    params: ListParams = Depends(list_params),
    db: AsyncSession = Depends(get_session),
):
    page = await usr_services.roles.list(db, params)
    return envelope(data=page.to_dict(usr_schemas.RoleListItem.model_validate))


@router.post(
    "/roles",
    response_model=Envelope[usr_schemas.RoleRead],
    status_code=status.HTTP_201_CREATED,
    summary="새 역할 생성",
)
async def create_role(
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_role = await usr_services.roles.create(db, payload, actor=actor)
    return envelope(message=usr_services.roles.message("created"), data=usr_schemas.RoleRead.model_validate(db_role))


@router.get("/roles/{role_id}", response_model=Envelope[usr_schemas.RoleReadWithUsers], summary="특정 역할 조회 (소속 사용자 포함)")
async def read_role(role_id: int, db: AsyncSession = Depends(get_session)):
    db_role = await usr_services.roles.get(db, role_id)
    return envelope(data=usr_schemas.RoleReadWithUsers.model_validate(db_role))


@router.put("/roles/{role_id}", response_model=Envelope[usr_schemas.RoleRead], summary="역할 수정")
async def update_role(
    role_id: int,
    payload: Dict[str, Any] = Depends(deps.read_payload),
    actor: str = Depends(deps.get_actor),
    db: AsyncSession = Depends(get_session),
):
    db_role = await usr_services.roles.update(db, role_id, payload, actor=actor)
    return envelope(message=usr_services.roles.message("updated"), data=usr_schemas.RoleRead.model_validate(db_role))


@router.delete("/roles/{role_id}", response_model=Envelope[Any], summary="역할 삭제 (연결된 사용자가 없을 때만)")
async def delete_role(role_id: int, db: AsyncSession = Depends(get_session)):
    await usr_services.roles.delete(db, role_id)
    return envelope(message=usr_services.roles.message("deleted"))
