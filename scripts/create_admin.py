# flake8: noqa
# scripts/create_admin.py

import asyncio
from datetime import date

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.database import get_async_session_context
from orgadmin.core.security import get_password_hash
from orgadmin.domains.usr import crud as usr_crud

cli = typer.Typer()

ADMIN_ROLE_NAME = "Administrator"
ADMIN_ROLE_LEVEL = 100000


async def create_admin_user(
    db: AsyncSession,
    *,
    employee_id: str,
    name: str,
    email: str,
    password: str,
) -> bool:
    """
    관리자 사용자를 생성하고 'Administrator' 역할을 연결하는 비동기 함수.
    이메일 또는 사번이 이미 존재하면 아무것도 만들지 않고 False를 반환합니다.
    """
    email = email.strip().lower()
    if await usr_crud.user.get_by_email(db, email=email):
        print(f"오류: 이미 존재하는 이메일입니다: {email}")
        return False

    if await usr_crud.user.get_by_attribute(db, attribute="u_employee_id", value=employee_id):
        print(f"오류: 이미 존재하는 사번입니다: {employee_id}")
        return False

    admin_role = await usr_crud.role.get_by_attribute(db, attribute="role_name", value=ADMIN_ROLE_NAME)
    if admin_role is None:
        admin_role = await usr_crud.role.create(
            db,
            obj_in={"role_name": ADMIN_ROLE_NAME, "role_level": ADMIN_ROLE_LEVEL, "role_is_active": True},
            commit=False,
        )

    db_user = await usr_crud.user.create(
        db,
        obj_in={
            "u_employee_id": employee_id,
            "u_name": name,
            "u_email": email,
            "u_password": get_password_hash(password),
            "u_join_date": date.today(),
            "u_is_active": True,
        },
        commit=False,
    )
    await usr_crud.user.attach_roles(db, user_id=db_user.u_id, role_ids=[admin_role.role_id])
    print(f"관리자 계정이 성공적으로 생성되었습니다: {email} ({employee_id})")
    return True


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    employee_id: str = typer.Option(
        ..., '--employee-id', '-i',
        prompt="관리자 사번을 입력하세요",
        help="관리자의 사번입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    name: str = typer.Option(
        "Admin", '--name', '-n',
        prompt="관리자 이름을 입력하세요",
        help="관리자의 이름입니다."
    ),
):
    """
    새로운 관리자 계정(Administrator 역할)을 생성합니다.
    """
    if len(password) < 8:
        print("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    print("관리자 계정 생성을 시작합니다...")

    async def run_creation() -> bool:
        # 컨텍스트 관리자가 성공 시 커밋, 오류 시 롤백합니다.
        async with get_async_session_context() as db:
            return await create_admin_user(
                db, employee_id=employee_id, name=name, email=email, password=password
            )

    if not asyncio.run(run_creation()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
