# orgadmin/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 모든 엔티티가 공유하는 비동기 저장소(Repository) 기본 클래스.
- `validation.py`: 엔티티별 검증 규칙 집합 (스키마 + 유일성/외래키 규칙).
- `resource.py`: 목록/조회/생성/수정/삭제를 묶은 공통 CRUD 리소스 처리기.
- `exceptions.py`: 오류 분류 체계와 공통 응답 봉투(envelope) 예외 처리기.
- `security.py`: 비밀번호 해싱, 토큰 발급/검증.
- `dependencies.py`: FastAPI 의존성 주입에 사용되는 공통 함수 (현재 사용자, 행위자).
"""

__title__ = "Orgadmin Core"
__description__ = "Core components for the organization master data API."
__version__ = "1.0.0"
__all__ = []
