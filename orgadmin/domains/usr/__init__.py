# orgadmin/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 시스템 사용자, 역할(role), 사용자-역할 연결, 그리고
Bearer 토큰 기반 인증(로그인/로그아웃/현재 사용자)을 관리하는 역할을 합니다.

주요 서브모듈:
- `models.py`: login_users, login_roles, login_user_roles, personal_access_tokens 테이블의 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델 (공통 응답 봉투, 로그인 스키마 포함).
- `crud.py`: 사용자/역할/토큰 저장소 및 역할 연결(attach/sync/detach) 로직.
- `rules.py`: 생성/수정 검증 규칙 집합.
- `services.py`: 인증 세션 관리와 사용자 리소스의 부수 효과 (비밀번호 해싱, 프로필 이미지, 역할 동기화).
- `routers.py`: /login, /me, /logout, /users, /roles API 엔드포인트.
"""

__title__ = "User Domain"
__description__ = "Manages users and roles, and handles bearer token authentication."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "rules", "services", "routers"]
