# orgadmin/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 비동기 세션 생성을 위한 유틸리티 함수를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 테이블을 생성하는 함수를 포함합니다 (개발용).
"""

import logging
from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import configure_mappers, sessionmaker
from sqlalchemy import event, text

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.config import settings
from orgadmin.core.database_base import SCHEMA

# =============================================================================
# 모든 도메인 모델 임포트
# =============================================================================
# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되어야
# 'configure_mappers()'와 create_all이 관계를 올바르게 인식합니다.
from orgadmin.domains.org import models  # noqa
from orgadmin.domains.usr import models  # noqa

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    """SQLite는 커넥션 풀 크기 옵션을 받지 않으므로 PostgreSQL 등에서만 풀 설정을 적용합니다."""
    kwargs: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "future": True}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_recycle=3600,  # 1시간마다 연결 재활용
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
        )
    return kwargs


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    SQLite는 연결마다 외래키 검사를 켜야 ON DELETE RESTRICT 같은 제약이 적용됩니다.
    다른 DB 엔진에는 아무 것도 하지 않습니다.
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


_database_url = settings.DATABASE_URL.get_secret_value()
engine: AsyncEngine = create_async_engine(_database_url, **_engine_kwargs(_database_url))
enable_sqlite_foreign_keys(engine)

# 비동기 세션을 생성하는 '세션 공장'을 정의합니다.
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata

_mappers_configured = False


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables() -> None:
    """
    데이터베이스 스키마 및 테이블을 생성합니다.
    개발 환경 전용이며, 기존 테이블을 삭제하지 않습니다. 운영 환경은 Alembic을 사용합니다.
    """
    global _mappers_configured

    async with engine.begin() as conn:
        if SCHEMA:
            await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}"))
            logger.info("스키마 '%s' 생성 완료 또는 이미 존재.", SCHEMA)

        if not _mappers_configured:
            configure_mappers()
            _mappers_configured = True

        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성이 완료되었습니다 (또는 이미 존재).")


# =============================================================================
# 비동기 데이터베이스 세션 의존성 주입
# =============================================================================
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    스크립트(CLI) 등 요청 밖에서 사용할 독립적인 비동기 DB 세션 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
