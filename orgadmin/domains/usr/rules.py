# orgadmin/domains/usr/rules.py

"""
사용자/역할 생성 및 수정 요청의 검증 규칙 집합입니다.

스키마 검증(필수, 타입, 길이, 범위, 비밀번호 확인, 이미지 형식) 외에
저장소 조회가 필요한 유일성(Unique)과 외래키 존재(Exists) 규칙을 선언합니다.
"""

from orgadmin.core.validation import Exists, RuleSet, Unique
from orgadmin.domains.org.models import Division, Position

from . import models as usr_models
from . import schemas as usr_schemas

_user_rules = {
    "u_employee_id": [Unique(usr_models.User, "u_employee_id", "u_id")],
    "u_email": [Unique(usr_models.User, "u_email", "u_id", case_insensitive=True)],
    "u_division_id": [Exists(Division, "div_id")],
    "u_position_id": [Exists(Position, "pos_id")],
    "u_manager_id": [Exists(usr_models.User, "u_id")],
    "roles": [Exists(usr_models.Role, "role_id")],
}

user_create = RuleSet(usr_schemas.UserCreate, rules=_user_rules)
user_update = RuleSet(usr_schemas.UserUpdate, rules=_user_rules)

_role_name = [Unique(usr_models.Role, "role_name", "role_id")]

role_create = RuleSet(usr_schemas.RoleCreate, rules={"role_name": _role_name})
role_update = RuleSet(usr_schemas.RoleUpdate, rules={"role_name": _role_name})
