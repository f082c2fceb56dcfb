"""Tests for login, logout and cookie authentication"""
from irequest.config.settings import settings
from tests.conftest import TEST_PASSWORD


def test_json_login_sets_cookie(client, users):
    response = client.post("/api/auth/login", json={"username": "alice", "password": TEST_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Đăng nhập thành công"
    assert body["user"]["user_id"] == users["alice"].user_id
    assert settings.auth_cookie_name in response.cookies

    # Cookie alone authenticates follow-up calls
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["user_name"] == "alice"


def test_bearer_token_from_login(client, users):
    token = client.post("/api/auth/login", json={"email": "bob@example.com", "password": TEST_PASSWORD}).json()["token"]
    client.cookies.clear()
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["user"]["user_id"] == users["bob"].user_id


def test_form_login_redirects_to_dashboard(client, users):
    response = client.post("/auth/login", data={"username": "alice", "password": TEST_PASSWORD})
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


def test_bad_credentials(client, users):
    response = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Tên đăng nhập hoặc mật khẩu không đúng"


def test_logout(client, users):
    client.post("/api/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
    response = client.post("/auth/logout")
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"
    assert client.get("/api/auth/me").status_code == 401


def test_token_for_deleted_user(client, auth_headers, users):
    from sqlalchemy import delete
    from irequest.repositories.database import query
    from irequest.repositories.tables import UserRoleRow, UserRow

    headers = auth_headers("carol")
    carol_id = users["carol"].user_id
    query(delete(UserRoleRow).where(UserRoleRow.user_id == carol_id))
    query(delete(UserRow).where(UserRow.id == carol_id))

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "User không tồn tại"


def test_lookups(client, auth_headers):
    statuses = client.get("/api/lookups/statuses", headers=auth_headers("alice")).json()["items"]
    priorities = client.get("/api/lookups/priorities", headers=auth_headers("alice")).json()["items"]
    assert len(statuses) == 5
    assert [p["sort_order"] for p in priorities] == [1, 2, 3, 4]


def test_user_lookup(client, auth_headers, users):
    everyone = client.get("/api/lookups/users", headers=auth_headers("alice")).json()["items"]
    assert [u["user_name"] for u in everyone] == ["admin", "alice", "bob", "carol"]
    found = client.get("/api/lookups/users?search=bob@", headers=auth_headers("alice")).json()["items"]
    assert [u["id"] for u in found] == [users["bob"].user_id]


def test_register_json(client, db):
    response = client.post("/api/auth/register", json={
        "username": "dave",
        "email": "dave@example.com",
        "password": "matkhau1",
        "confirmPassword": "matkhau1",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Đăng ký thành công"
    assert body["user"]["roles"] == ["User"]
    assert settings.auth_cookie_name in response.cookies


def test_register_form_redirects_and_duplicate_conflicts(client, users):
    form = {"username": "erin", "email": "erin@example.com", "password": "matkhau1",
            "confirmPassword": "matkhau1", "department": ""}
    response = client.post("/auth/register", data=form)
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"

    duplicate = client.post("/api/auth/register", json={**form, "email": "other@example.com"})
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Tên đăng nhập đã được sử dụng"


def test_change_password(client, auth_headers, users):
    headers = auth_headers("alice")
    wrong = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "sai", "newPassword": "MatKhauMoi@1"},
        headers=headers
    )
    assert wrong.status_code == 400

    changed = client.post(
        "/auth/change-password",
        data={"currentPassword": TEST_PASSWORD, "newPassword": "MatKhauMoi@1"},
        headers=headers
    )
    assert changed.status_code == 303
    assert changed.headers["location"] == "/users/profile"

    login = client.post("/api/auth/login", json={"username": "alice", "password": "MatKhauMoi@1"})
    assert login.status_code == 200
