# tests/domains/test_usr_n.py

"""
'usr' 도메인 (사용자 및 역할 관리) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import os

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.config import settings
from orgadmin.core.validation import Unique
from orgadmin.domains.usr import crud as usr_crud
from orgadmin.domains.usr import models as usr_models

from tests.conftest import TEST_PASSWORD


def _user_payload(**overrides):
    payload = {
        "u_employee_id": "EMP100",
        "u_name": "Bob Lee",
        "u_email": "Bob.Lee@Example.com",
        "u_password": "password123",
        "u_password_confirmation": "password123",
        "u_join_date": "2024-03-01",
    }
    payload.update(overrides)
    return payload


async def _user_role_count(db_session: AsyncSession, user_id: int) -> int:
    statement = select(func.count()).select_from(usr_models.UserRole).where(usr_models.UserRole.ur_user_id == user_id)
    return (await db_session.exec(statement)).one()


# =============================================================================
# 1. 사용자 생성
# =============================================================================
@pytest.mark.asyncio
async def test_create_user_success(
    authorized_client: AsyncClient,
    test_user: usr_models.User,
    test_role: usr_models.Role,
    test_division,
):
    """
    새 사용자를 생성하면 부서/직위/역할이 포함된 상세 정보가 반환되고,
    비밀번호는 응답에 포함되지 않습니다.
    """
    payload = _user_payload(u_division_id=test_division.div_id, roles=[test_role.role_id])
    response = await authorized_client.post("/api/users", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    data = body["data"]
    assert data["u_employee_id"] == "EMP100"
    assert data["u_email"] == "bob.lee@example.com"
    assert data["division"]["div_code"] == "ENG"
    assert data["position"] is None
    assert [r["role_name"] for r in data["roles"]] == ["Editor"]
    assert data["u_is_active"] is True
    assert data["u_is_manager"] is False
    assert data["u_created_by"] == str(test_user.u_id)
    assert "u_password" not in data
    assert "u_password_confirmation" not in data

    # 생성된 사용자는 새 비밀번호로 로그인할 수 있습니다.
    login = await authorized_client.post("/api/login", json={"email": "bob.lee@example.com", "password": "password123"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_create_user_missing_fields(authorized_client: AsyncClient):
    response = await authorized_client.post("/api/users", json={})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    errors = body["errors"]
    assert errors["u_employee_id"] == ["The u employee id field is required."]
    assert errors["u_name"] == ["The u name field is required."]
    assert errors["u_email"] == ["The u email field is required."]
    assert errors["u_password"] == ["The u password field is required."]
    assert errors["u_join_date"] == ["The u join date field is required."]


@pytest.mark.asyncio
async def test_create_user_duplicate_unique_fields(
    authorized_client: AsyncClient,
    test_user: usr_models.User,
):
    """사번과 이메일(대소문자 무시) 중복은 필드별로 함께 보고되며, 기존 레코드는 그대로입니다."""
    payload = _user_payload(u_employee_id="EMP001", u_email="A@EXAMPLE.COM")
    response = await authorized_client.post("/api/users", json=payload)

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors["u_employee_id"] == ["The u employee id has already been taken."]
    assert errors["u_email"] == ["The u email has already been taken."]

    original = await authorized_client.get(f"/api/users/{test_user.u_id}")
    assert original.json()["data"]["u_name"] == "Alice Kim"


@pytest.mark.asyncio
async def test_create_user_password_confirmation_mismatch(authorized_client: AsyncClient):
    payload = _user_payload(u_password_confirmation="different123")
    response = await authorized_client.post("/api/users", json=payload)
    assert response.status_code == 422
    assert response.json()["errors"] == {"u_password": ["The u password field confirmation does not match."]}


@pytest.mark.asyncio
async def test_create_user_short_password(authorized_client: AsyncClient):
    payload = _user_payload(u_password="short", u_password_confirmation="short")
    response = await authorized_client.post("/api/users", json=payload)
    assert response.status_code == 422
    assert "u_password" in response.json()["errors"]


@pytest.mark.asyncio
async def test_create_user_form_blank_reference_is_not_checked(authorized_client: AsyncClient):
    """
    폼에서 빈 문자열로 보낸 참조 필드는 null로 취급되어,
    다른 필드가 스키마 검증에 실패해도 존재 여부 오류를 만들지 않습니다.
    """
    data = _user_payload(u_password="short", u_password_confirmation="short", u_division_id="", u_manager_id="")
    response = await authorized_client.post("/api/users", data=data)
    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"u_password"}


@pytest.mark.asyncio
async def test_create_user_unknown_references(authorized_client: AsyncClient, test_role: usr_models.Role):
    payload = _user_payload(u_division_id=9999, u_manager_id=9999, roles=[test_role.role_id, 9999])
    response = await authorized_client.post("/api/users", json=payload)
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors["u_division_id"] == ["The selected u division id is invalid."]
    assert errors["u_manager_id"] == ["The selected u manager id is invalid."]
    assert errors["roles"] == ["The selected roles is invalid."]


@pytest.mark.asyncio
async def test_create_user_reports_schema_and_rule_errors_together(
    authorized_client: AsyncClient,
    test_user: usr_models.User,
):
    """스키마 위반과 저장소 규칙 위반이 필드 간에 함께 누적됩니다."""
    payload = _user_payload(u_employee_id="EMP001", u_join_date="not-a-date")
    response = await authorized_client.post("/api/users", json=payload)
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "u_join_date" in errors
    assert errors["u_employee_id"] == ["The u employee id has already been taken."]


@pytest.mark.asyncio
async def test_create_user_requires_token(client: AsyncClient):
    response = await client.post("/api/users", json=_user_payload())
    assert response.status_code == 401


# =============================================================================
# 2. 프로필 이미지 (multipart/form-data)
# =============================================================================
@pytest.mark.asyncio
async def test_create_user_with_profile_image(authorized_client: AsyncClient, test_role: usr_models.Role):
    data = {
        "u_employee_id": "EMP150",
        "u_name": "Carol Park",
        "u_email": "carol@example.com",
        "u_password": "password123",
        "u_password_confirmation": "password123",
        "u_join_date": "2024-05-01",
        "u_phone": "",
        "roles[]": [str(test_role.role_id)],
    }
    files = {"u_profile_image": ("carol.png", b"\x89PNG\r\n\x1a\nfake-image", "image/png")}
    response = await authorized_client.post("/api/users", data=data, files=files)

    assert response.status_code == 201
    created = response.json()["data"]
    assert created["u_profile_image"] == "profile_images/carol.png"
    assert created["u_phone"] is None
    assert [r["role_id"] for r in created["roles"]] == [test_role.role_id]
    assert os.path.exists(os.path.join(settings.UPLOAD_DIR, "profile_images", "carol.png"))

    served = await authorized_client.get("/storage/profile_images/carol.png")
    assert served.status_code == 200


@pytest.mark.asyncio
async def test_replacing_profile_image_removes_previous_file(authorized_client: AsyncClient):
    data = {
        "u_employee_id": "EMP151",
        "u_name": "Dave Choi",
        "u_email": "dave@example.com",
        "u_password": "password123",
        "u_password_confirmation": "password123",
        "u_join_date": "2024-05-01",
    }
    files = {"u_profile_image": ("dave-old.jpg", b"old-image", "image/jpeg")}
    created = await authorized_client.post("/api/users", data=data, files=files)
    assert created.status_code == 201
    user_id = created.json()["data"]["u_id"]
    old_path = os.path.join(settings.UPLOAD_DIR, "profile_images", "dave-old.jpg")
    assert os.path.exists(old_path)

    files = {"u_profile_image": ("dave-new.gif", b"new-image", "image/gif")}
    updated = await authorized_client.put(f"/api/users/{user_id}", data={"u_name": "Dave Choi"}, files=files)

    assert updated.status_code == 200
    assert updated.json()["data"]["u_profile_image"] == "profile_images/dave-new.gif"
    assert not os.path.exists(old_path)
    assert os.path.exists(os.path.join(settings.UPLOAD_DIR, "profile_images", "dave-new.gif"))


@pytest.mark.asyncio
async def test_profile_image_must_be_an_image(authorized_client: AsyncClient):
    data = {
        "u_employee_id": "EMP152",
        "u_name": "Eve Han",
        "u_email": "eve@example.com",
        "u_password": "password123",
        "u_password_confirmation": "password123",
        "u_join_date": "2024-05-01",
    }
    files = {"u_profile_image": ("notes.txt", b"plain text", "text/plain")}
    response = await authorized_client.post("/api/users", data=data, files=files)

    assert response.status_code == 422
    assert response.json()["errors"]["u_profile_image"] == [
        "The u profile image field must be a file of type: jpeg, png, jpg, gif."
    ]
    assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, "profile_images", "notes.txt"))


@pytest.mark.asyncio
async def test_failed_create_does_not_store_profile_image(
    authorized_client: AsyncClient,
    test_user: usr_models.User,
    db_session: AsyncSession,
    monkeypatch,
):
    """
    저장 단계에서 롤백된 요청(동시 요청으로 인한 중복 이메일)은
    프로필 이미지 파일을 남기지 않습니다.
    """
    async def never_taken(self, db, field, value, ignore_id):
        return None

    monkeypatch.setattr(Unique, "check", never_taken)

    data = _user_payload(u_employee_id="EMP153", u_email="a@example.com")
    files = {"u_profile_image": ("orphan.png", b"\x89PNG-orphan", "image/png")}
    response = await authorized_client.post("/api/users", data=data, files=files)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "The user conflicts with existing data."}
    assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, "profile_images", "orphan.png"))
    count = (await db_session.exec(select(func.count()).select_from(usr_models.User))).one()
    assert count == 1


@pytest.mark.asyncio
async def test_failed_create_keeps_existing_image_with_same_name(
    authorized_client: AsyncClient,
    test_user: usr_models.User,
    monkeypatch,
):
    """롤백된 요청은 같은 파일명을 쓰는 다른 사용자의 이미지를 덮어쓰지 않습니다."""
    data = _user_payload(u_employee_id="EMP154", u_email="grace@example.com")
    files = {"u_profile_image": ("shared-avatar.png", b"original-image", "image/png")}
    created = await authorized_client.post("/api/users", data=data, files=files)
    assert created.status_code == 201

    async def never_taken(self, db, field, value, ignore_id):
        return None

    monkeypatch.setattr(Unique, "check", never_taken)

    data = _user_payload(u_employee_id="EMP154", u_email="henry@example.com")
    files = {"u_profile_image": ("shared-avatar.png", b"replacement", "image/png")}
    response = await authorized_client.post("/api/users", data=data, files=files)
    assert response.status_code == 400

    with open(os.path.join(settings.UPLOAD_DIR, "profile_images", "shared-avatar.png"), "rb") as f:
        assert f.read() == b"original-image"


# =============================================================================
# 3. 사용자 조회 / 목록
# =============================================================================
@pytest.mark.asyncio
async def test_read_user_includes_manager(authorized_client: AsyncClient, user_factory, test_user: usr_models.User):
    member = await user_factory("EMP201", "member@example.com", u_manager_id=test_user.u_id)

    response = await authorized_client.get(f"/api/users/{member.u_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["u_manager_id"] == test_user.u_id
    assert data["manager"]["u_email"] == "a@example.com"
    assert "u_password" not in data["manager"]


@pytest.mark.asyncio
async def test_read_user_not_found(authorized_client: AsyncClient):
    response = await authorized_client.get("/api/users/9999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found"}


@pytest.mark.asyncio
async def test_list_users_pagination(authorized_client: AsyncClient, user_factory):
    for i in range(3):
        await user_factory(f"EMP30{i}", f"list{i}@example.com")

    response = await authorized_client.get("/api/users", params={"per_page": 2})
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["current_page"] == 1
    assert page["per_page"] == 2
    assert page["total"] == 4
    assert page["last_page"] == 2
    assert page["from"] == 1
    assert page["to"] == 2
    assert len(page["data"]) == 2

    response = await authorized_client.get("/api/users", params={"per_page": 2, "page": 2})
    page = response.json()["data"]
    assert page["from"] == 3
    assert page["to"] == 4

    response = await authorized_client.get("/api/users", params={"per_page": 2, "page": 5})
    page = response.json()["data"]
    assert page["data"] == []
    assert page["from"] is None
    assert page["to"] is None


@pytest.mark.asyncio
async def test_list_users_search(authorized_client: AsyncClient, user_factory):
    await user_factory("EMP401", "bob@example.com", name="Bob Lee")
    await user_factory("EMP402", "carol@example.com", name="Carol Park")

    by_name = await authorized_client.get("/api/users", params={"search": "ALI"})
    assert [u["u_name"] for u in by_name.json()["data"]["data"]] == ["Alice Kim"]

    by_employee_id = await authorized_client.get("/api/users", params={"search": "emp402"})
    assert [u["u_email"] for u in by_employee_id.json()["data"]["data"]] == ["carol@example.com"]

    # LIKE 와일드카드는 문자 그대로 취급합니다.
    wildcard = await authorized_client.get("/api/users", params={"search": "%"})
    assert wildcard.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_list_users_sorting(authorized_client: AsyncClient, user_factory):
    await user_factory("EMP501", "zed@example.com", name="Zed")
    await user_factory("EMP502", "bea@example.com", name="Bea")

    by_name = await authorized_client.get("/api/users", params={"sort_by": "u_name", "sort_order": "desc"})
    assert [u["u_name"] for u in by_name.json()["data"]["data"]] == ["Zed", "Bea", "Alice Kim"]

    # 허용 목록에 없는 정렬 컬럼은 생략한 것과 같습니다 (기본키 기준).
    disallowed = await authorized_client.get("/api/users", params={"sort_by": "u_password", "sort_order": "desc"})
    omitted = await authorized_client.get("/api/users", params={"sort_order": "desc"})
    assert disallowed.status_code == 200
    ids = [u["u_id"] for u in disallowed.json()["data"]["data"]]
    assert ids == [u["u_id"] for u in omitted.json()["data"]["data"]]
    assert ids == sorted(ids, reverse=True)


# =============================================================================
# 4. 사용자 수정
# =============================================================================
@pytest.mark.asyncio
async def test_update_user_partial(authorized_client: AsyncClient, test_user: usr_models.User):
    response = await authorized_client.put(f"/api/users/{test_user.u_id}", json={"u_phone": "010-1234-5678"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User updated successfully"
    data = body["data"]
    assert data["u_phone"] == "010-1234-5678"
    assert data["u_name"] == "Alice Kim"
    assert data["division"]["div_code"] == "ENG"
    assert data["u_updated_by"] == str(test_user.u_id)

    # 비밀번호를 보내지 않았으므로 기존 비밀번호가 유지됩니다.
    login = await authorized_client.post("/api/login", json={"email": "a@example.com", "password": TEST_PASSWORD})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_user_keeps_own_unique_values(authorized_client: AsyncClient, test_user: usr_models.User):
    response = await authorized_client.put(
        f"/api/users/{test_user.u_id}",
        json={"u_employee_id": "EMP001", "u_email": "A@example.com"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["u_email"] == "a@example.com"


@pytest.mark.asyncio
async def test_update_user_conflicting_email(authorized_client: AsyncClient, user_factory, test_user: usr_models.User):
    other = await user_factory("EMP601", "other@example.com")
    response = await authorized_client.put(f"/api/users/{other.u_id}", json={"u_email": "a@example.com"})
    assert response.status_code == 422
    assert response.json()["errors"]["u_email"] == ["The u email has already been taken."]


@pytest.mark.asyncio
async def test_update_user_explicit_null_on_required_field(authorized_client: AsyncClient, test_user: usr_models.User):
    response = await authorized_client.put(f"/api/users/{test_user.u_id}", json={"u_name": None})
    assert response.status_code == 422
    assert response.json()["errors"]["u_name"] == ["The u name field is required."]


@pytest.mark.asyncio
async def test_update_user_password(client: AsyncClient, authorized_client: AsyncClient, user_factory):
    other = await user_factory("EMP602", "pw@example.com")
    response = await authorized_client.put(
        f"/api/users/{other.u_id}",
        json={"u_password": "newpassword1", "u_password_confirmation": "newpassword1"},
    )
    assert response.status_code == 200

    old = await client.post("/api/login", json={"email": "pw@example.com", "password": TEST_PASSWORD})
    new = await client.post("/api/login", json={"email": "pw@example.com", "password": "newpassword1"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_user_syncs_roles(authorized_client: AsyncClient, user_factory, db_session: AsyncSession):
    role_a = usr_models.Role(role_name="Viewer", role_level=1)
    role_b = usr_models.Role(role_name="Auditor", role_level=5)
    db_session.add_all([role_a, role_b])
    await db_session.commit()
    member = await user_factory("EMP603", "roles@example.com", role_ids=[role_a.role_id])

    # roles를 보내지 않으면 기존 역할이 유지됩니다.
    response = await authorized_client.put(f"/api/users/{member.u_id}", json={"u_name": "Renamed"})
    assert [r["role_name"] for r in response.json()["data"]["roles"]] == ["Viewer"]

    response = await authorized_client.put(f"/api/users/{member.u_id}", json={"roles": [role_b.role_id]})
    assert response.status_code == 200
    assert [r["role_name"] for r in response.json()["data"]["roles"]] == ["Auditor"]

    response = await authorized_client.put(f"/api/users/{member.u_id}", json={"roles": []})
    assert response.json()["data"]["roles"] == []
    assert await _user_role_count(db_session, member.u_id) == 0


@pytest.mark.asyncio
async def test_update_user_not_found(authorized_client: AsyncClient):
    response = await authorized_client.put("/api/users/9999", json={"u_name": "Nobody"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_user_invalid_json(authorized_client: AsyncClient, test_user: usr_models.User):
    response = await authorized_client.put(
        f"/api/users/{test_user.u_id}",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert "__root__" in response.json()["errors"]


# =============================================================================
# 5. 사용자 삭제
# =============================================================================
@pytest.mark.asyncio
async def test_delete_user(
    authorized_client: AsyncClient,
    user_factory,
    test_role: usr_models.Role,
    db_session: AsyncSession,
):
    """
    사용자를 삭제하면 역할 연결이 해제되고, 부하 직원의 관리자 ID는 비워집니다.
    """
    manager = await user_factory("EMP701", "boss@example.com", role_ids=[test_role.role_id])
    member = await user_factory("EMP702", "report@example.com", u_manager_id=manager.u_id)

    response = await authorized_client.delete(f"/api/users/{manager.u_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully"

    assert (await authorized_client.get(f"/api/users/{manager.u_id}")).status_code == 404
    assert await _user_role_count(db_session, manager.u_id) == 0

    member_data = (await authorized_client.get(f"/api/users/{member.u_id}")).json()["data"]
    assert member_data["u_manager_id"] is None
    assert member_data["manager"] is None

    role_data = (await authorized_client.get(f"/api/roles/{test_role.role_id}")).json()["data"]
    assert role_data["users"] == []


@pytest.mark.asyncio
async def test_delete_user_revokes_tokens(
    authorized_client_factory,
    authorized_client: AsyncClient,
    user_factory,
):
    doomed = await user_factory("EMP703", "doomed@example.com")
    async with authorized_client_factory(doomed, TEST_PASSWORD) as doomed_client:
        assert (await doomed_client.get("/api/me")).status_code == 200

        response = await authorized_client.delete(f"/api/users/{doomed.u_id}")
        assert response.status_code == 200

        assert (await doomed_client.get("/api/me")).status_code == 401


@pytest.mark.asyncio
async def test_delete_user_not_found(authorized_client: AsyncClient):
    response = await authorized_client.delete("/api/users/9999")
    assert response.status_code == 404


# =============================================================================
# 6. 역할 (Role) 관리
# =============================================================================
@pytest.mark.asyncio
async def test_create_role(authorized_client: AsyncClient):
    response = await authorized_client.post("/api/roles", json={"role_name": "Reviewer", "role_level": 50})
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Role created successfully"
    assert body["data"]["role_name"] == "Reviewer"
    assert body["data"]["role_is_active"] is True


@pytest.mark.asyncio
async def test_create_role_validation(authorized_client: AsyncClient, test_role: usr_models.Role):
    duplicate = await authorized_client.post("/api/roles", json={"role_name": "Editor", "role_level": 1})
    assert duplicate.status_code == 422
    assert duplicate.json()["errors"] == {"role_name": ["The role name has already been taken."]}

    out_of_range = await authorized_client.post("/api/roles", json={"role_name": "Root", "role_level": 100001})
    assert out_of_range.status_code == 422
    assert "role_level" in out_of_range.json()["errors"]


@pytest.mark.asyncio
async def test_list_roles_includes_users_count(
    authorized_client: AsyncClient,
    user_factory,
    test_role: usr_models.Role,
    db_session: AsyncSession,
):
    unused = usr_models.Role(role_name="Unused", role_level=0)
    db_session.add(unused)
    await db_session.commit()
    await user_factory("EMP801", "r1@example.com", role_ids=[test_role.role_id])
    await user_factory("EMP802", "r2@example.com", role_ids=[test_role.role_id])

    response = await authorized_client.get("/api/roles", params={"sort_by": "role_name"})
    assert response.status_code == 200
    counts = {r["role_name"]: r["users_count"] for r in response.json()["data"]["data"]}
    assert counts == {"Editor": 2, "Unused": 0}


@pytest.mark.asyncio
async def test_read_active_roles(authorized_client: AsyncClient, test_role: usr_models.Role, db_session: AsyncSession):
    db_session.add(usr_models.Role(role_name="Retired", role_level=0, role_is_active=False))
    await db_session.commit()

    response = await authorized_client.get("/api/roles/all")
    assert response.status_code == 200
    assert [r["role_name"] for r in response.json()["data"]] == ["Editor"]


@pytest.mark.asyncio
async def test_read_role_with_users(authorized_client: AsyncClient, user_factory, test_role: usr_models.Role):
    await user_factory("EMP803", "member3@example.com", role_ids=[test_role.role_id])

    response = await authorized_client.get(f"/api/roles/{test_role.role_id}")
    assert response.status_code == 200
    users = response.json()["data"]["users"]
    assert [u["u_email"] for u in users] == ["member3@example.com"]


@pytest.mark.asyncio
async def test_update_role(authorized_client: AsyncClient, test_role: usr_models.Role):
    response = await authorized_client.put(
        f"/api/roles/{test_role.role_id}",
        json={"role_name": "Editor", "role_level": 20, "role_is_active": False},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role_level"] == 20
    assert data["role_is_active"] is False


@pytest.mark.asyncio
async def test_delete_role_blocked_by_users(
    authorized_client: AsyncClient,
    user_factory,
    test_role: usr_models.Role,
):
    member = await user_factory("EMP804", "member4@example.com", role_ids=[test_role.role_id])

    blocked = await authorized_client.delete(f"/api/roles/{test_role.role_id}")
    assert blocked.status_code == 400
    assert blocked.json() == {"success": False, "message": "Cannot delete role. It has associated users."}

    await authorized_client.put(f"/api/users/{member.u_id}", json={"roles": []})
    deleted = await authorized_client.delete(f"/api/roles/{test_role.role_id}")
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Role deleted successfully"
    assert (await authorized_client.get(f"/api/roles/{test_role.role_id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_role_rejected_when_member_added_after_check(
    authorized_client: AsyncClient,
    user_factory,
    test_role: usr_models.Role,
    db_session: AsyncSession,
    monkeypatch,
):
    """종속 레코드 확인 이후에 연결된 사용자가 있어도 역할과 연결 행은 그대로 남습니다."""
    member = await user_factory("EMP805", "member5@example.com", role_ids=[test_role.role_id])

    async def no_dependents(db, id):
        return 0

    monkeypatch.setattr(usr_crud.role, "count_dependents", no_dependents)

    response = await authorized_client.delete(f"/api/roles/{test_role.role_id}")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Cannot delete role. It has associated users."}
    assert await _user_role_count(db_session, member.u_id) == 1
    assert (await authorized_client.get(f"/api/roles/{test_role.role_id}")).status_code == 200
