# tests/__init__.py

"""
orgadmin API의 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트 데이터베이스(SQLite), 클라이언트, 기준 데이터 픽스처
- `core/`: 공통 모듈 단위 테스트
- `domains/`: 도메인별(usr, org, dash) API 통합 테스트
"""

__title__ = "orgadmin API Tests"
__version__ = "1.0.0"
__all__ = []
