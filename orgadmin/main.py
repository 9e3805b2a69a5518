# orgadmin/main.py

import logging
import os
from datetime import datetime, timezone
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# 핵심 설정 및 데이터베이스 모듈 임포트
from orgadmin.core.config import settings
from orgadmin.core.database import create_db_and_tables, engine, get_session
from orgadmin.core.exceptions import register_exception_handlers

from orgadmin import API_PREFIX

# 각 도메인의 라우터들을 임포트합니다.
from orgadmin.domains.usr.routers import auth_router as usr_auth_router
from orgadmin.domains.usr.routers import router as usr_router
from orgadmin.domains.org.routers import router as org_router
from orgadmin.domains.dash.routers import router as dash_router

# -- 로깅 설정 --
# 애플리케이션 전체에서 한 번만 설정하며, 각 모듈은 logging.getLogger(__name__)을 사용합니다.
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(업로드 폴더, 데이터베이스)를 처리합니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중... (env=%s)", settings.APP_ENV)
    try:
        os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
        # 개발 환경 편의용. 운영 환경의 스키마 변경은 Alembic을 사용합니다.
        await create_db_and_tables()
    except Exception:
        logger.exception("애플리케이션 시작 중 오류 발생")
        raise

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 업로드된 프로필 이미지 공개 경로 (예: /storage/profile_images/xxx.png)
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/storage", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="storage")

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 전역 예외 처리기 (공통 응답 봉투) --
register_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(usr_auth_router, prefix=API_PREFIX)
app.include_router(usr_router, prefix=API_PREFIX)
app.include_router(org_router, prefix=API_PREFIX)
app.include_router(dash_router, prefix=API_PREFIX)


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get(f"{API_PREFIX}/health", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    애플리케이션의 헬스 체크 엔드포인트입니다. 인증이 필요 없습니다.
    데이터베이스 점검이 실패해도 200을 반환하며, services.database가 "ERROR"가 됩니다.
    예외 내용은 로그에만 남깁니다.
    """
    database_status = "OK"
    try:
        result = await session.execute(text("SELECT 1"))
        if result.scalar() != 1:
            database_status = "ERROR"
    except Exception:
        logger.exception("헬스 체크 중 데이터베이스 점검 실패")
        database_status = "ERROR"

    return {
        "status": "UP",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "database": database_status,
            "app": "OK",
        },
        "version": settings.APP_VERSION,
    }


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("orgadmin.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
