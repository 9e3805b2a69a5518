# orgadmin/domains/org/services.py

"""
부서/직위 CRUD 리소스 인스턴스입니다.
두 엔티티 모두 별도의 부수 효과가 없으므로 일반 CRUDResource를 그대로 사용하며,
소속 사용자가 있는 동안에는 삭제가 거부됩니다.
"""

from orgadmin.core.resource import CRUDResource

from . import crud as org_crud
from . import rules as org_rules

divisions = CRUDResource(
    org_crud.division,
    label="Division",
    create_rules=org_rules.division_create,
    update_rules=org_rules.division_update,
)

positions = CRUDResource(
    org_crud.position,
    label="Position",
    create_rules=org_rules.position_create,
    update_rules=org_rules.position_update,
)
