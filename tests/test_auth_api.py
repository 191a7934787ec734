from datetime import timedelta

from sso_admin.models.permission import Permission
from sso_admin.models.role import USER
from sso_admin.security import Principal, create_access_token

def test_login_success(client, admin):
    # 使用 Form Data 模擬登入
    response = client.post(
        "/api/auth/login",
        data={"username": "admin@example.com", "password": "admin123"},
    )
    assert response.status_code == 200
    assert "access_token" in response.cookies
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["principal"]["email"] == "admin@example.com"
    assert body["principal"]["role"] == "Admin"
    assert set(body["principal"]["permissions"]) == {"manage_users", "view_limited_logs", "basic_configuration"}

def test_login_failure(client, admin):
    response = client.post(
        "/api/auth/login",
        data={"username": "admin@example.com", "password": "wrongpassword"},
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}
    assert "access_token" not in response.cookies

def test_login_unknown_email(client, roles):
    response = client.post(
        "/api/auth/login",
        data={"username": "nobody@example.com", "password": "admin123"},
    )
    assert response.status_code == 401

def test_session_returns_principal(client, superadmin, headers_for):
    response = client.get("/api/auth/session", headers=headers_for(superadmin))
    assert response.status_code == 200
    assert response.json()["role"] == "SuperAdmin"
    assert "manage_admins" in response.json()["permissions"]

def test_session_requires_token(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

def test_bearer_header_is_accepted(client, superadmin):
    token = create_access_token(Principal.from_user(superadmin))
    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200

def test_invalid_token_is_unauthorized(client, roles):
    response = client.get("/api/roles", headers={"Cookie": "access_token=Bearer not-a-jwt"})
    assert response.status_code == 401

def test_expired_token_is_unauthorized(client, admin):
    token = create_access_token(Principal.from_user(admin), expires_delta=timedelta(minutes=-1))
    response = client.get("/api/roles", headers={"Cookie": f"access_token=Bearer {token}"})
    assert response.status_code == 401

def test_token_of_deleted_user_is_unauthorized(client, db_session, regular_user, headers_for):
    headers = headers_for(regular_user)
    db_session.delete(regular_user)
    db_session.commit()
    response = client.get("/api/roles", headers=headers)
    assert response.status_code == 401

def test_permissions_are_a_login_snapshot(client, db_session, admin, roles, headers_for):
    headers = headers_for(admin)

    # 登入後新增的權限要重新登入才看得到
    extra = Permission(name="late_permission", description="added after login")
    db_session.add(extra)
    roles["Admin"].permissions.append(extra)
    db_session.commit()

    response = client.get("/api/auth/session", headers=headers)
    assert "late_permission" not in response.json()["permissions"]

def test_role_is_checked_against_database(client, db_session, admin, roles, headers_for):
    headers = headers_for(admin)
    # 令牌仍寫著 Admin，但資料庫已降級
    admin.role = roles[USER]
    db_session.commit()

    response = client.get("/api/roles", headers=headers)
    assert response.status_code == 403

def test_logout(client, admin, headers_for):
    response = client.post("/api/auth/logout", headers=headers_for(admin))
    assert response.status_code == 200
    cookie_header = response.headers.get("set-cookie", "")
    assert "access_token=" in cookie_header
    assert 'access_token=""' in cookie_header or "Max-Age=0" in cookie_header

def test_login_page_sets_cookie_and_redirects(client, admin):
    response = client.post(
        "/login",
        data={"username": "admin@example.com", "password": "admin123"},
        follow_redirects=False
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "access_token" in response.cookies

def test_login_page_failure_renders_error(client, admin):
    response = client.post(
        "/login",
        data={"username": "admin@example.com", "password": "nope"},
        follow_redirects=False
    )
    assert response.status_code == 401
    assert "Invalid email or password" in response.text

def test_dashboard_requires_login(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login"

def test_dashboard_shows_role_and_permissions(client, superadmin, headers_for):
    response = client.get("/", headers=headers_for(superadmin))
    assert response.status_code == 200
    assert "SuperAdmin" in response.text
    assert "manage_admins" in response.text
    assert "System Logs" in response.text

def test_dashboard_hides_super_admin_blocks_for_admin(client, admin, headers_for):
    response = client.get("/", headers=headers_for(admin))
    assert response.status_code == 200
    assert "Admin Management" not in response.text
    assert "System Logs" not in response.text
