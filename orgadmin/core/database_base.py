# orgadmin/core/database_base.py

"""
모델 정의에서 공통으로 사용하는 스키마/외래키 이름 헬퍼입니다.

엔진을 만들지 않으므로 모델 모듈에서 순환 임포트 없이 사용할 수 있습니다.
"""

from typing import Any, Dict, Optional

from orgadmin.core.config import settings

# 설정된 이름 있는 스키마 (없으면 기본 스키마 사용)
SCHEMA: Optional[str] = settings.DB_SCHEMA or None


def table_args(**extra: Any) -> Dict[str, Any]:
    """`__table_args__` 딕셔너리를 만듭니다. 스키마가 설정된 경우에만 'schema' 키를 넣습니다."""
    args: Dict[str, Any] = dict(extra)
    if SCHEMA:
        args["schema"] = SCHEMA
    return args


def fk(target: str) -> str:
    """'table.column' 형태의 외래키 대상을 스키마를 포함한 이름으로 변환합니다."""
    return f"{SCHEMA}.{target}" if SCHEMA else target
