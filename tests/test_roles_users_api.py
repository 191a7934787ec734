from sso_admin.models.role import SUPER_ADMIN, ADMIN, USER

def test_roles_super_admin_sees_all(client, superadmin, headers_for):
    response = client.get("/api/roles", headers=headers_for(superadmin))
    assert response.status_code == 200
    assert {r["name"] for r in response.json()} == {SUPER_ADMIN, ADMIN, USER}

def test_roles_admin_never_sees_super_admin(client, admin, headers_for):
    response = client.get("/api/roles", headers=headers_for(admin))
    assert response.status_code == 200
    names = {r["name"] for r in response.json()}
    assert names == {ADMIN, USER}

def test_roles_listing_has_no_permission_details(client, superadmin, headers_for):
    response = client.get("/api/roles", headers=headers_for(superadmin))
    for role in response.json():
        assert set(role) == {"id", "name", "description"}

def test_roles_user_forbidden(client, regular_user, headers_for):
    response = client.get("/api/roles", headers=headers_for(regular_user))
    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}

def test_roles_require_login(client, roles):
    assert client.get("/api/roles").status_code == 401

def test_list_users(client, admin, regular_user, headers_for):
    response = client.get("/api/users", headers=headers_for(admin))
    assert response.status_code == 200
    body = response.json()
    assert {u["email"] for u in body} == {"superadmin@example.com", "admin@example.com", "someone@example.com"}
    someone = next(u for u in body if u["email"] == "someone@example.com")
    assert someone["role"]["name"] == USER
    assert "password_hash" not in someone

def test_list_users_filtered_by_role(client, admin, regular_user, headers_for):
    response = client.get("/api/users", params={"role": USER}, headers=headers_for(admin))
    assert response.status_code == 200
    assert [u["email"] for u in response.json()] == ["someone@example.com"]

def test_list_users_user_forbidden(client, regular_user, headers_for):
    assert client.get("/api/users", headers=headers_for(regular_user)).status_code == 403

def test_admin_promotes_user_to_admin(client, db_session, admin, regular_user, roles, headers_for):
    response = client.patch(
        f"/api/users/{regular_user.id}/role",
        json={"roleId": roles[ADMIN].id},
        headers=headers_for(admin)
    )
    assert response.status_code == 200
    assert response.json()["role"] == {"id": roles[ADMIN].id, "name": ADMIN}
    db_session.refresh(regular_user)
    assert regular_user.role.name == ADMIN

def test_admin_cannot_assign_super_admin(client, db_session, admin, regular_user, roles, headers_for):
    response = client.patch(
        f"/api/users/{regular_user.id}/role",
        json={"roleId": roles[SUPER_ADMIN].id},
        headers=headers_for(admin)
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Admins cannot assign SuperAdmin role"}
    db_session.refresh(regular_user)
    assert regular_user.role.name == USER

def test_admin_cannot_modify_super_admin(client, admin, superadmin, roles, headers_for):
    response = client.patch(
        f"/api/users/{superadmin.id}/role",
        json={"roleId": roles[USER].id},
        headers=headers_for(admin)
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Only SuperAdmins can modify other SuperAdmins"}

def test_super_admin_can_assign_super_admin(client, superadmin, regular_user, roles, headers_for):
    response = client.patch(
        f"/api/users/{regular_user.id}/role",
        json={"roleId": roles[SUPER_ADMIN].id},
        headers=headers_for(superadmin)
    )
    assert response.status_code == 200
    assert response.json()["role"]["name"] == SUPER_ADMIN

def test_update_role_requires_role_id(client, admin, regular_user, headers_for):
    response = client.patch(f"/api/users/{regular_user.id}/role", json={}, headers=headers_for(admin))
    assert response.status_code == 400
    assert response.json() == {"error": "Role ID is required"}

def test_update_role_unknown_user(client, admin, roles, headers_for):
    response = client.patch("/api/users/9999/role", json={"roleId": roles[USER].id}, headers=headers_for(admin))
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}

def test_update_role_unknown_role(client, admin, regular_user, headers_for):
    response = client.patch(f"/api/users/{regular_user.id}/role", json={"roleId": 9999}, headers=headers_for(admin))
    assert response.status_code == 404
    assert response.json() == {"error": "Role not found"}

def test_update_role_user_forbidden(client, regular_user, admin, roles, headers_for):
    response = client.patch(
        f"/api/users/{admin.id}/role",
        json={"roleId": roles[USER].id},
        headers=headers_for(regular_user)
    )
    assert response.status_code == 403
