# orgadmin/core/resource.py

"""
모든 엔티티 API가 공유하는 일반 CRUD 리소스 처리기(Resource Handler) 모듈입니다.

하나의 CRUDResource 인스턴스는 저장소(CRUDBase)와 생성/수정 규칙 집합(RuleSet)에
바인딩되어 다음 다섯 가지 작업(+ 활성 목록)을 제공합니다.

- list(params)          : 검색/정렬/페이징 목록
- list_all_active()     : 활성 레코드 전체 (페이징 없음)
- create(payload, actor): 검증 → 부수 효과 → 삽입 → 관계 연결
- get(id)               : 관계 포함 단건 조회 (없으면 NotFoundError)
- update(id, payload, actor)
- delete(id)            : 종속 레코드가 있으면 ConflictError

엔티티별 부수 효과(비밀번호 해싱, 프로필 이미지 저장, 역할 동기화 등)는
prepare / after_write / before_delete / after_commit 훅을 재정의하여 구현합니다.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.config import settings
from orgadmin.core.crud_base import CRUDBase, Page, PageQuery, resolve_actor
from orgadmin.core.exceptions import ConflictError, NotFoundError, ValidationError
from orgadmin.core.validation import RuleSet

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
ResultType = TypeVar("ResultType")


# =============================================================================
# 1. 목록 조회 파라미터
# =============================================================================
def _positive_int(value: Optional[str], default: int) -> int:
    """숫자가 아니거나 1 미만인 값은 기본값으로 대체합니다."""
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number > 0 else default


@dataclass
class ListParams:
    """
    목록 조회 쿼리 파라미터.
    모든 값은 선택 사항이며, 잘못된 값은 오류 대신 안전한 기본값으로 대체됩니다.
    """
    page: int = 1
    per_page: int = settings.DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    search: Optional[str] = None

    @classmethod
    def parse(
        cls,
        *,
        page: Optional[str] = None,
        per_page: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        search: Optional[str] = None,
    ) -> "ListParams":
        order = (sort_order or "asc").strip().lower()
        return cls(
            page=_positive_int(page, 1),
            per_page=min(_positive_int(per_page, settings.DEFAULT_PAGE_SIZE), settings.MAX_PAGE_SIZE),
            sort_by=(sort_by or "").strip() or None,
            sort_order=order if order in ("asc", "desc") else "asc",
            search=(search or "").strip() or None,
        )

    @classmethod
    def from_mapping(cls, query: Mapping[str, Any]) -> "ListParams":
        """알 수 없는 키는 무시합니다."""
        return cls.parse(
            page=query.get("page"),
            per_page=query.get("per_page"),
            sort_by=query.get("sort_by"),
            sort_order=query.get("sort_order"),
            search=query.get("search"),
        )

    def to_query(self, *, searchable: bool = True) -> PageQuery:
        return PageQuery(
            page=self.page,
            per_page=self.per_page,
            sort_by=self.sort_by,
            descending=self.sort_order == "desc",
            search=self.search if searchable else None,
        )


def list_params(
    page: Optional[str] = Query(None, description="페이지 번호 (기본 1)"),
    per_page: Optional[str] = Query(None, description=f"페이지 크기 (기본 {settings.DEFAULT_PAGE_SIZE}, 최대 {settings.MAX_PAGE_SIZE})"),
    sort_by: Optional[str] = Query(None, description="정렬 컬럼 (허용 목록 외에는 기본키)"),
    sort_order: Optional[str] = Query(None, description="asc 또는 desc"),
    search: Optional[str] = Query(None, description="검색어 (지원하는 리소스에서만 적용)"),
) -> ListParams:
    """
    FastAPI 의존성. 정수 파라미터를 문자열로 받아 직접 정규화하므로
    'per_page=abc' 같은 값도 422 대신 기본값으로 처리됩니다.
    """
    return ListParams.parse(page=page, per_page=per_page, sort_by=sort_by, sort_order=sort_order, search=search)


# =============================================================================
# 2. 일반 CRUD 리소스
# =============================================================================
class CRUDResource(Generic[ModelType]):
    """
    저장소와 규칙 집합으로 매개변수화된 CRUD 작업 흐름.

    :param crud: 엔티티 저장소 (CRUDBase 하위 클래스 인스턴스)
    :param label: 메시지에 사용할 엔티티 이름 (예: "Division")
    :param create_rules: 생성 규칙 집합
    :param update_rules: 수정 규칙 집합 (자기 자신은 유일성 검사에서 제외)
    :param dependents_label: 삭제를 막는 종속 레코드의 이름 (복수형)
    """

    def __init__(
        self,
        crud: CRUDBase,
        *,
        label: str,
        create_rules: RuleSet,
        update_rules: RuleSet,
        dependents_label: str = "users",
    ):
        self.crud = crud
        self.label = label
        self.create_rules = create_rules
        self.update_rules = update_rules
        self.dependents_label = dependents_label

    # --- 메시지 ---
    def message(self, action: str) -> str:
        return f"{self.label} {action} successfully"

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    @property
    def dependents_message(self) -> str:
        return f"Cannot delete {self.label.lower()}. It has associated {self.dependents_label}."

    # --- 확장 훅 ---
    async def prepare(
        self, db: AsyncSession, obj_in: BaseModel, *, db_obj: Optional[ModelType] = None
    ) -> Dict[str, Any]:
        """
        검증된 입력에서 저장할 컬럼 값을 만듭니다.
        생성 시에는 기본값까지, 수정 시에는 전달된 필드만 포함합니다.
        """
        return obj_in.model_dump(exclude_unset=db_obj is not None)

    async def after_write(
        self, db: AsyncSession, db_obj: ModelType, obj_in: BaseModel, *, actor: str, creating: bool
    ) -> None:
        """같은 트랜잭션 안에서 연관 데이터를 반영합니다 (예: 역할 연결)."""

    async def before_delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """삭제 직전에 연관 데이터를 정리합니다 (예: 역할 연결 해제)."""

    async def after_commit(
        self, db_obj: ModelType, obj_in: BaseModel, *, previous: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        커밋이 끝난 뒤 처리할 부수 효과 (예: 업로드 파일 저장, 교체된 파일 삭제).
        트랜잭션이 롤백되면 호출되지 않습니다.
        """

    # --- 작업 ---
    async def list(self, db: AsyncSession, params: ListParams) -> Page:
        return await self.crud.get_page(db, params.to_query(searchable=bool(self.crud.search_fields)))

    async def list_all_active(self, db: AsyncSession) -> List[ModelType]:
        return await self.crud.get_active(db)

    async def get(self, db: AsyncSession, id: Any) -> ModelType:
        db_obj = await self.crud.get(db, id, with_relations=True)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)
        return db_obj

    async def create(self, db: AsyncSession, payload: Dict[str, Any], *, actor: Optional[Any] = None) -> ModelType:
        actor = resolve_actor(actor)
        obj_in = await self.create_rules.validate(db, payload)

        async def work() -> ModelType:
            data = await self.prepare(db, obj_in)
            db_obj = await self.crud.create(db, obj_in=data, actor=actor, commit=False)
            await self.after_write(db, db_obj, obj_in, actor=actor, creating=True)
            return db_obj

        db_obj = await self._write(db, work, rules=self.create_rules, obj_in=obj_in)
        new_id = getattr(db_obj, self.crud.pk_field)
        logger.info("%s 생성: id=%s, actor=%s", self.label, new_id, actor)
        await self.after_commit(db_obj, obj_in)
        return await self.get(db, new_id)

    async def update(
        self, db: AsyncSession, id: Any, payload: Dict[str, Any], *, actor: Optional[Any] = None
    ) -> ModelType:
        actor = resolve_actor(actor)
        db_obj = await self.crud.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)

        obj_in = await self.update_rules.validate(db, payload, ignore_id=id)
        previous = db_obj.model_dump()

        async def work() -> ModelType:
            data = await self.prepare(db, obj_in, db_obj=db_obj)
            updated = await self.crud.update(db, db_obj=db_obj, obj_in=data, actor=actor, commit=False)
            await self.after_write(db, updated, obj_in, actor=actor, creating=False)
            return updated

        db_obj = await self._write(db, work, rules=self.update_rules, obj_in=obj_in, ignore_id=id)
        logger.info("%s 수정: id=%s, actor=%s", self.label, id, actor)
        await self.after_commit(db_obj, obj_in, previous=previous)
        return await self.get(db, id)

    async def delete(self, db: AsyncSession, id: Any) -> None:
        db_obj = await self.crud.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)

        dependents = await self.crud.count_dependents(db, id)
        if dependents > 0:
            logger.info("%s 삭제 거부: id=%s, 종속 레코드 %d건", self.label, id, dependents)
            raise ConflictError(self.dependents_message)

        try:
            await self.before_delete(db, db_obj)
            await self.crud.delete(db, db_obj=db_obj, commit=False)
            await db.commit()
        except IntegrityError as e:
            # 사전 확인 이후에 종속 레코드가 생긴 경우 DB의 외래키 제약이 삭제를 막습니다.
            await db.rollback()
            logger.warning("%s 삭제 중 무결성 오류: id=%s, %s", self.label, id, e.orig)
            raise ConflictError(self.dependents_message)
        logger.info("%s 삭제: id=%s", self.label, id)

    # --- 트랜잭션 ---
    async def _write(
        self,
        db: AsyncSession,
        work: Callable[[], Awaitable[ResultType]],
        *,
        rules: RuleSet,
        obj_in: BaseModel,
        ignore_id: Optional[Any] = None,
    ) -> ResultType:
        """
        쓰기 작업 전체를 하나의 커밋으로 묶습니다.
        사전 검사를 통과했더라도 저장소의 유일성 제약에 걸리면 롤백 후
        원인 필드를 다시 확인하여 ValidationError로 변환합니다.
        """
        try:
            result = await work()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("%s 저장 중 무결성 오류: %s", self.label, e.orig)
            errors = await rules.first_violation(db, obj_in, ignore_id=ignore_id)
            if errors:
                raise ValidationError(errors)
            raise ConflictError(f"The {self.label.lower()} conflicts with existing data.")
        return result
