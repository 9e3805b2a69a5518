# orgadmin/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 저장소(Repository) 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에서 동작합니다.

각 엔티티 저장소는 이 클래스를 상속하여 다음을 선언합니다.
- pk_field        : 기본키 속성 이름 (예: "div_id")
- audit_prefix    : 감사 컬럼 접두어 (예: "div" → div_created_by, div_updated_at ...)
- active_field    : 활성 여부 컬럼
- sort_fields     : 정렬 허용 컬럼 Enum (목록에 없는 값은 기본키 오름차순으로 대체)
- search_fields   : 검색 대상 텍스트 컬럼 (비어있으면 검색 미지원)
- list_options / detail_options : 직렬화 시 N+1 조회를 막기 위한 즉시 로딩 옵션
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from sqlalchemy import func, or_
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

# 인증된 행위자가 없을 때 감사 컬럼에 기록되는 값
SYSTEM_ACTOR = "system"


def resolve_actor(actor: Optional[Any]) -> str:
    """행위자 ID를 감사 컬럼용 문자열로 변환합니다. 없으면 'system'."""
    if actor is None or actor == "":
        return SYSTEM_ACTOR
    return str(actor)


@dataclass
class Page:
    """페이지 단위 목록 조회 결과"""
    items: List[Any]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1

    def to_dict(self, serialize: Callable[[Any], Any]) -> Dict[str, Any]:
        """
        페이지 봉투를 만듭니다.
        from/to는 현재 페이지 항목의 1-기반 범위이며, 항목이 없으면 None입니다.
        """
        first = (self.page - 1) * self.per_page + 1 if self.items else None
        last = first + len(self.items) - 1 if first is not None else None
        return {
            "current_page": self.page,
            "data": [serialize(item) for item in self.items],
            "per_page": self.per_page,
            "total": self.total,
            "last_page": self.last_page,
            "from": first,
            "to": last,
        }


@dataclass
class PageQuery:
    """저장소 목록 조회 파라미터 (이미 정규화된 값)"""
    page: int = 1
    per_page: int = 10
    sort_by: Optional[str] = None
    descending: bool = False
    search: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    pk_field: str = "id"
    audit_prefix: Optional[str] = None
    active_field: Optional[str] = None
    sort_fields: Optional[Type[Enum]] = None
    search_fields: Tuple[str, ...] = ()
    list_options: Tuple[Callable[[], Any], ...] = ()
    detail_options: Tuple[Callable[[], Any], ...] = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    @property
    def pk_column(self):
        return getattr(self.model, self.pk_field)

    def _options(self, factories: Sequence[Callable[[], Any]]) -> List[Any]:
        # 로더 옵션은 관계가 모두 매핑된 후에 만들어야 하므로 팩토리로 보관합니다.
        return [factory() for factory in factories]

    async def get(self, db: AsyncSession, id: Any, *, with_relations: bool = False) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다.
        with_relations=True이면 detail_options의 관계를 즉시 로딩하며,
        이미 세션에 있는 객체도 최신 상태로 다시 채웁니다.
        """
        if not with_relations:
            return await db.get(self.model, id)
        statement = (
            select(self.model)
            .where(self.pk_column == id)
            .options(*self._options(self.detail_options))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any, exclude_id: Optional[Any] = None
    ) -> Optional[ModelType]:
        """
        특정 속성 값으로 단일 레코드를 조회합니다.
        exclude_id가 주어지면 해당 기본키의 레코드는 제외합니다 (수정 시 자기 자신 제외).
        """
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        if exclude_id is not None:
            statement = statement.where(self.pk_column != exclude_id)
        result = await db.execute(statement.limit(1))
        return result.scalars().first()

    async def exists(self, db: AsyncSession, id: Any) -> bool:
        result = await db.execute(select(func.count()).select_from(self.model).where(self.pk_column == id))
        return (result.scalar_one() or 0) > 0

    def resolve_sort_column(self, sort_by: Optional[str]) -> str:
        """정렬 허용 Enum에 없는 컬럼은 기본키로 대체합니다 (오류 없음)."""
        if sort_by and self.sort_fields is not None:
            try:
                return self.sort_fields(sort_by).value
            except ValueError:
                pass
        return self.pk_field

    def _search_condition(self, search: str):
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return or_(*[getattr(self.model, name).ilike(pattern, escape="\\") for name in self.search_fields])

    def _filtered_statement(self, query: PageQuery):
        statement = select(self.model)
        for attribute, value in query.filters.items():
            statement = statement.where(getattr(self.model, attribute) == value)
        if query.search and self.search_fields:
            statement = statement.where(self._search_condition(query.search))
        return statement

    async def _fetch_page_items(self, db: AsyncSession, statement) -> List[Any]:
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_page(self, db: AsyncSession, query: PageQuery) -> Page:
        """
        검색, 정렬, 페이징을 적용한 목록을 조회합니다.
        """
        base = self._filtered_statement(query)

        count_statement = select(func.count()).select_from(base.order_by(None).subquery())
        total = (await db.execute(count_statement)).scalar_one()

        sort_column = getattr(self.model, self.resolve_sort_column(query.sort_by))
        order = sort_column.desc() if query.descending else sort_column.asc()
        statement = (
            base.options(*self._options(self.list_options))
            .order_by(order, self.pk_column.asc())
            .offset((query.page - 1) * query.per_page)
            .limit(query.per_page)
        )
        items = await self._fetch_page_items(db, statement)
        return Page(items=items, total=total, page=query.page, per_page=query.per_page)

    async def get_active(self, db: AsyncSession) -> List[ModelType]:
        """활성 레코드 전체를 페이징 없이 조회합니다."""
        statement = select(self.model)
        if self.active_field:
            statement = statement.where(getattr(self.model, self.active_field).is_(True))
        result = await db.execute(statement.order_by(self.pk_column.asc()))
        return list(result.scalars().all())

    async def count(self, db: AsyncSession, **filters: Any) -> int:
        """조건(속성=값)에 맞는 레코드 수. 조건이 없으면 전체 건수."""
        statement = select(func.count()).select_from(self.model)
        for attribute, value in filters.items():
            statement = statement.where(getattr(self.model, attribute) == value)
        return (await db.execute(statement)).scalar_one()

    async def count_dependents(self, db: AsyncSession, id: Any) -> int:
        """
        이 레코드를 참조하는 다른 엔티티 레코드 수를 반환합니다.
        0보다 크면 삭제가 거부됩니다. 종속 관계가 없는 엔티티는 0.
        """
        return 0

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------
    def _audit(self, name: str) -> Optional[str]:
        return f"{self.audit_prefix}_{name}" if self.audit_prefix else None

    def _stamp(self, data: Dict[str, Any], *, actor: str, creating: bool) -> Dict[str, Any]:
        now = datetime.now(UTC)
        if self.audit_prefix:
            if creating:
                data[self._audit("created_by")] = actor
                data[self._audit("created_at")] = now
            data[self._audit("updated_by")] = actor
            data[self._audit("updated_at")] = now
        return data

    @staticmethod
    def _as_dict(obj_in: Union[BaseModel, Dict[str, Any]], *, exclude_unset: bool) -> Dict[str, Any]:
        if isinstance(obj_in, dict):
            return dict(obj_in)
        return obj_in.model_dump(exclude_unset=exclude_unset)

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        actor: Optional[Any] = None,
        commit: bool = True,
    ) -> ModelType:
        """
        새로운 레코드를 생성합니다. 생성자/수정자 감사 컬럼을 기록합니다.
        commit=False이면 flush만 수행하여 호출자가 트랜잭션 경계를 결정합니다.
        """
        data = self._stamp(self._as_dict(obj_in, exclude_unset=False), actor=resolve_actor(actor), creating=True)
        db_obj = self.model(**data)
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        actor: Optional[Any] = None,
        commit: bool = True,
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다 (전달된 필드만 반영).
        """
        update_data = self._stamp(self._as_dict(obj_in, exclude_unset=True), actor=resolve_actor(actor), creating=False)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def delete(self, db: AsyncSession, *, db_obj: ModelType, commit: bool = True) -> ModelType:
        """
        레코드를 삭제합니다.
        """
        await db.delete(db_obj)
        if commit:
            await db.commit()
        else:
            await db.flush()
        return db_obj
