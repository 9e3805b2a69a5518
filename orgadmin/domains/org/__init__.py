# orgadmin/domains/org/__init__.py

"""
FastAPI 애플리케이션의 'org' 도메인 패키지입니다.

'org' 도메인은 조직 구조의 기준정보, 즉 부서(division)와 직위(position)를
관리하는 역할을 합니다. 두 엔티티 모두 사용자가 참조하는 동안에는 삭제할 수 없습니다.

주요 서브모듈:
- `models.py`: login_divisions, login_positions 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 비동기 저장소 (종속 사용자 수 확인 포함).
- `rules.py`: 생성/수정 검증 규칙 집합.
- `services.py`: 부서/직위 CRUD 리소스 인스턴스.
- `routers.py`: /divisions, /positions API 엔드포인트.
"""

__title__ = "Organization Structure Domain"
__description__ = "Manages divisions and positions."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "rules", "services", "routers"]
