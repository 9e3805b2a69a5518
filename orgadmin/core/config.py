# orgadmin/core/config.py

from typing import Any, List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',                      # .env 파일에 정의되었지만 모델에 없는 변수는 무시
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Organization Master Data API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Users, roles, divisions and positions administration API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Echo SQL statements")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async SQLAlchemy database URL (postgresql+asyncpg://...)")
    # 모든 테이블을 특정 스키마 아래에 둘 경우 지정 (예: "orgadmin"). SQLite에서는 비워둡니다.
    DB_SCHEMA: Optional[str] = Field(None, description="Named schema for every table")

    # --- 토큰 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for bearer token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for token signing")
    # 0 또는 None이면 만료 없이 로그아웃(폐기) 시까지 유효합니다.
    ACCESS_TOKEN_EXPIRE_MINUTES: Optional[int] = Field(60 * 24, description="Access token lifetime in minutes")
    BCRYPT_ROUNDS: int = Field(12, description="bcrypt cost factor")

    # --- 파일 업로드 설정 ---
    UPLOAD_DIR: str = Field(os.path.join(BASE_DIR, "storage", "app", "public"), description="Root directory for uploaded files.")

    # --- 목록 조회 설정 ---
    DEFAULT_PAGE_SIZE: int = Field(10, description="Default per_page for list endpoints")
    MAX_PAGE_SIZE: int = Field(100, description="Upper bound for per_page")

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 상대 경로로 지정된 UPLOAD_DIR은 프로젝트 루트 기준으로 해석합니다.
        if not os.path.isabs(self.UPLOAD_DIR):
            self.UPLOAD_DIR = os.path.join(BASE_DIR, self.UPLOAD_DIR)


settings = Settings()
