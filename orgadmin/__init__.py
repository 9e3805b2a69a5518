# orgadmin/__init__.py

"""
조직 기준정보(Organization Master Data) FastAPI 애플리케이션의 메인 패키지입니다.

이 패키지는 사용자, 역할, 부서(division), 직위(position) 및
Bearer 토큰 기반 인증을 관리하는 API를 포함합니다.
FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 보안, 공통 CRUD 리소스를 담는 core 서브패키지,
그리고 각 비즈니스 도메인을 대표하는 domains 서브패키지로 구성됩니다.
"""

APP_NAME = "Organization Master Data API"
APP_VERSION = "1.0.0"
API_PREFIX = "/api"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Users, roles, divisions and positions administration API backend."
__license__ = "MIT"
__all__ = []
