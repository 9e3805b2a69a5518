# orgadmin/utils/__init__.py

"""
특정 비즈니스 도메인에 속하지 않는 범용 유틸리티 패키지입니다.

주요 서브모듈:
- `files.py`: 업로드 파일 저장, 삭제, 경로 처리 등 파일 관련 유틸리티 함수.
"""

# flake8: noqa
from . import files

__title__ = "Application Utilities"
__description__ = "Provides common, reusable utility functions for the application."
__version__ = "0.1.0"
__all__ = ["files"]
