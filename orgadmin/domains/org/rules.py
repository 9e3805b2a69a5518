# orgadmin/domains/org/rules.py

"""
부서/직위 생성 및 수정 요청의 검증 규칙 집합입니다.
"""

from orgadmin.core.validation import RuleSet, Unique

from . import models as org_models
from . import schemas as org_schemas

_division_code = [Unique(org_models.Division, "div_code", "div_id")]
_position_code = [Unique(org_models.Position, "pos_code", "pos_id")]

division_create = RuleSet(org_schemas.DivisionCreate, rules={"div_code": _division_code})
division_update = RuleSet(org_schemas.DivisionUpdate, rules={"div_code": _division_code})

position_create = RuleSet(org_schemas.PositionCreate, rules={"pos_code": _position_code})
position_update = RuleSet(org_schemas.PositionUpdate, rules={"pos_code": _position_code})
