# orgadmin/domains/__init__.py

"""
비즈니스 도메인 패키지 모음입니다.

- `usr`: 사용자, 역할, 사용자-역할 연결, 인증 토큰
- `org`: 부서(division), 직위(position)
- `dash`: 대시보드 통계 (읽기 전용 집계)
"""
