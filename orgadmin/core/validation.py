# orgadmin/core/validation.py

"""
엔티티별 검증 규칙 집합(Rule Set)을 정의하는 모듈입니다.

규칙 집합은 두 단계로 구성됩니다.
1. pydantic 스키마: 필수 여부, 타입, 길이, 범위 등 저장소와 무관한 규칙
2. 저장소 규칙: 유일성(Unique), 외래키 존재(Exists) 등 DB 조회가 필요한 규칙

필드별로는 첫 번째 위반에서 멈추고, 필드 간에는 위반을 모두 누적한 뒤
하나의 ValidationError(422)로 보고합니다. 실패 시 어떤 변경도 적용되지 않습니다.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.exceptions import ErrorMap, ValidationError, errors_from_pydantic, humanize

SchemaType = TypeVar("SchemaType", bound=BaseModel)


@dataclass(frozen=True)
class Unique:
    """컬럼 값이 테이블 안에서 유일해야 함 (수정 시 자기 자신 제외)"""
    model: Type[SQLModel]
    column: str
    pk: str
    case_insensitive: bool = False

    async def check(self, db: AsyncSession, field: str, value: Any, ignore_id: Optional[Any]) -> Optional[str]:
        if value is None:
            return None
        column = getattr(self.model, self.column)
        if self.case_insensitive and isinstance(value, str):
            condition = func.lower(column) == value.lower()
        else:
            condition = column == value
        statement = select(func.count()).select_from(self.model).where(condition)
        if ignore_id is not None:
            statement = statement.where(getattr(self.model, self.pk) != ignore_id)
        if (await db.execute(statement)).scalar_one() > 0:
            return f"The {humanize(field)} has already been taken."
        return None


@dataclass(frozen=True)
class Exists:
    """값(또는 목록의 각 값)이 참조 테이블의 키로 존재해야 함"""
    model: Type[SQLModel]
    column: str

    async def check(self, db: AsyncSession, field: str, value: Any, ignore_id: Optional[Any]) -> Optional[str]:
        if value is None:
            return None
        values = list(value) if isinstance(value, (list, tuple, set)) else [value]
        if not values:
            return None
        keys = set(values)
        column = getattr(self.model, self.column)
        result = await db.execute(select(column).where(column.in_(keys)))
        found = set(result.scalars().all())
        if keys - found:
            return f"The selected {humanize(field)} is invalid."
        return None


def _coerce_key(value: Any) -> Any:
    """스키마 검증에 실패한 원시 값에서 저장소 규칙을 돌릴 수 있는 키만 추립니다."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _raw_rule_value(raw: Any, field_rules: List[Any]) -> Any:
    """
    스키마 검증 전의 원시 값을 저장소 규칙에 넘길 값으로 바꿉니다.
    빈 문자열은 null과 같이 취급하고, 외래키(Exists) 필드는 정수 키로 변환합니다.
    None을 반환하면 해당 필드의 저장소 규칙은 건너뜁니다.
    """
    if isinstance(raw, list):
        keys = [_coerce_key(v) for v in raw]
        return keys if all(k is not None for k in keys) else None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    if any(isinstance(rule, Exists) for rule in field_rules):
        return _coerce_key(raw)
    return raw


class RuleSet(Generic[SchemaType]):
    """
    하나의 작업(생성 또는 수정)에 대한 검증 규칙 집합입니다.

    사용 예:
        rules = RuleSet(DivisionCreate, rules={"div_code": [Unique(Division, "div_code", "div_id")]})
        obj_in = await rules.validate(db, payload)
    """

    def __init__(self, schema: Type[SchemaType], rules: Optional[Dict[str, Iterable[Any]]] = None):
        self.schema = schema
        self.rules: Dict[str, List[Any]] = {name: list(items) for name, items in (rules or {}).items()}

    async def validate(
        self, db: AsyncSession, payload: Dict[str, Any], *, ignore_id: Optional[Any] = None
    ) -> SchemaType:
        """
        페이로드를 검증하고 정규화된 스키마 객체를 반환합니다.
        위반이 하나라도 있으면 필드별 메시지 맵과 함께 ValidationError를 발생시킵니다.
        """
        errors: ErrorMap = {}
        obj_in: Optional[SchemaType] = None
        try:
            obj_in = self.schema.model_validate(payload)
        except PydanticValidationError as e:
            errors.update(errors_from_pydantic(e.errors()))

        if obj_in is not None:
            values = obj_in.model_dump(exclude_unset=True)
        else:
            values = {}
            # 스키마에서 통과한 필드에 대해서도 저장소 규칙 위반을 함께 보고합니다.
            for name, raw in payload.items():
                if name in errors or name not in self.rules:
                    continue
                value = _raw_rule_value(raw, self.rules[name])
                if value is not None:
                    values[name] = value

        for name, field_rules in self.rules.items():
            if name in errors or name not in values:
                continue
            for rule in field_rules:
                message = await rule.check(db, name, values[name], ignore_id)
                if message:
                    errors[name] = [message]
                    break

        if errors or obj_in is None:
            raise ValidationError(errors)
        return obj_in

    async def first_violation(self, db: AsyncSession, obj_in: BaseModel, *, ignore_id: Optional[Any] = None) -> ErrorMap:
        """
        이미 검증된 객체에 대해 저장소 규칙만 다시 확인합니다.
        동시 요청으로 인한 무결성 오류(IntegrityError)의 원인 필드를 찾을 때 사용합니다.
        """
        errors: ErrorMap = {}
        values = obj_in.model_dump(exclude_unset=True)
        for name, field_rules in self.rules.items():
            if name not in values:
                continue
            for rule in field_rules:
                message = await rule.check(db, name, values[name], ignore_id)
                if message:
                    errors[name] = [message]
                    break
        return errors
