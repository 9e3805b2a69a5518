# tests/domains/__init__.py

"""
도메인별 API 통합 테스트 패키지입니다.

- `test_auth_n.py`: 로그인, 현재 사용자, 로그아웃
- `test_usr_n.py`: 사용자 및 역할 관리
- `test_org_n.py`: 부서 및 직위 관리
- `test_dash_n.py`: 대시보드 통계
"""

__title__ = "orgadmin Domain Tests"
__all__ = []
