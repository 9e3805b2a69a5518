# tests/conftest.py

import os
import tempfile
from datetime import date
from typing import AsyncGenerator, Awaitable, Callable, Iterable, Optional
from contextlib import asynccontextmanager

# --- 테스트 환경 변수 ---
# orgadmin 설정은 임포트 시점에 로드되므로 애플리케이션 모듈보다 먼저 지정합니다.
_TEST_ROOT = tempfile.mkdtemp(prefix="orgadmin-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_ROOT, 'app.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-for-bearer-tokens"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "public")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

# orgadmin.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from orgadmin.main import app as main_app  # noqa: E402
from orgadmin.core.database import enable_sqlite_foreign_keys, get_session  # noqa: E402
from orgadmin.core.security import get_password_hash  # noqa: E402

# --- 모델 임포트 ---
# SQLModel.metadata.create_all()이 모든 테이블을 인식하도록 모든 모델을 임포트합니다.
from orgadmin.domains.org import models as org_models  # noqa: E402
from orgadmin.domains.usr import models as usr_models  # noqa: E402

TEST_PASSWORD = "secret123"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 새로운 SQLite 파일 데이터베이스를 만들고 모든 테이블을 생성합니다.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        future=True,
        poolclass=NullPool,     # 각 연결이 독립적으로 사용되고 바로 닫히도록 함
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
def session_factory(test_engine: AsyncEngine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    테스트 데이터 준비 및 결과 확인용 세션입니다.
    API 요청은 별도의 세션을 사용하므로, 이 세션에서의 변경은 반드시 커밋해야 합니다.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(session_factory):
    """get_session 의존성을 테스트 데이터베이스 세션으로 오버라이드한 앱"""
    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides[get_session] = override_get_session
    try:
        yield main_app
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


@pytest_asyncio.fixture(scope="function")
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """인증되지 않은 클라이언트"""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- 기준 데이터 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_division(db_session: AsyncSession) -> org_models.Division:
    """테스트용 부서를 데이터베이스에 생성하고 반환합니다."""
    division = org_models.Division(div_code="ENG", div_name="Engineering")
    db_session.add(division)
    await db_session.commit()
    await db_session.refresh(division)
    return division


@pytest_asyncio.fixture(scope="function")
async def test_position(db_session: AsyncSession) -> org_models.Position:
    """테스트용 직위를 데이터베이스에 생성하고 반환합니다."""
    position = org_models.Position(pos_code="MGR", pos_name="Manager")
    db_session.add(position)
    await db_session.commit()
    await db_session.refresh(position)
    return position


@pytest_asyncio.fixture(scope="function")
async def test_role(db_session: AsyncSession) -> usr_models.Role:
    """테스트용 역할을 데이터베이스에 생성하고 반환합니다."""
    role = usr_models.Role(role_name="Editor", role_level=10)
    db_session.add(role)
    await db_session.commit()
    await db_session.refresh(role)
    return role


@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    속성을 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    role_ids가 주어지면 사용자-역할 연결도 함께 만듭니다.
    """
    async def _create_user(
        employee_id: str,
        email: str,
        password: str = TEST_PASSWORD,
        *,
        name: Optional[str] = None,
        is_active: bool = True,
        role_ids: Iterable[int] = (),
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(
            u_employee_id=employee_id,
            u_name=name or f"User {employee_id}",
            u_email=email.lower(),
            u_password=get_password_hash(password),
            u_join_date=kwargs.pop("u_join_date", date(2024, 1, 2)),
            u_is_active=is_active,
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        for role_id in role_ids:
            db_session.add(usr_models.UserRole(ur_user_id=user.u_id, ur_role_id=role_id, ur_created_by="system"))
        if role_ids:
            await db_session.commit()
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_user(
    user_factory: Callable,
    test_division: org_models.Division,
    test_position: org_models.Position,
) -> usr_models.User:
    """로그인에 사용할 활성 사용자"""
    return await user_factory(
        "EMP001", "a@example.com",
        name="Alice Kim",
        u_division_id=test_division.div_id,
        u_position_id=test_position.pos_id,
    )


# --- 인증 클라이언트 픽스처 ---
# 실제 /api/login 요청으로 토큰을 받아 Authorization 헤더에 포함시킨 클라이언트를 만듭니다.
@pytest_asyncio.fixture(scope="function")
def authorized_client_factory(test_app):
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            res = await ac.post("/api/login", json={"email": user.u_email, "password": password})
            if res.status_code != 200:
                pytest.fail(f"Login failed for {user.u_email}: {res.text}")

            token = res.json()["data"]["token"]
            ac.headers["Authorization"] = f"Bearer {token}"
            yield ac

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def authorized_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """test_user로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_user, TEST_PASSWORD) as ac:
        yield ac
