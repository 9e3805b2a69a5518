# orgadmin/domains/dash/__init__.py

"""
FastAPI 애플리케이션의 'dash' 도메인 패키지입니다.

자체 테이블 없이 'usr', 'org' 도메인의 데이터를 읽기 전용으로 집계하여
대시보드 통계 (전체/활성 건수, 부서별·직위별 사용자 수, 최근 등록 사용자)를 제공합니다.
"""

__title__ = "Dashboard Domain"
__description__ = "Read-only statistics over users, roles, divisions and positions."
__version__ = "0.1.0"
__all__ = ["schemas", "services", "routers"]
