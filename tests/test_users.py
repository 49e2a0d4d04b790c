from chef_site.config import settings
from conftest import login


NEW_USER = {
    "first_name": "Sous",
    "last_name": "Chef",
    "email": "Sous@Example.com",
    "password": "mise-en-place",
    "role": "editor",
}


def use_session(client, token):
    client.cookies.clear()
    client.cookies.set(settings.SESSION_COOKIE_NAME, token)


def test_create_user_never_returns_password(admin_client):
    response = admin_client.post("/api/users", json=NEW_USER)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "sous@example.com"
    assert body["role"] == "editor"
    assert body["is_active"] is True
    assert "password" not in body
    assert "password_hash" not in body

    listed = admin_client.get("/api/users").json()
    assert {user["email"] for user in listed} == {"admin@example.com", "sous@example.com"}
    assert all("password_hash" not in user for user in listed)


def test_duplicate_email_conflicts(admin_client):
    assert admin_client.post("/api/users", json=NEW_USER).status_code == 201

    response = admin_client.post("/api/users", json={**NEW_USER, "email": "sous@example.com"})

    assert response.status_code == 409
    assert response.json() == {"error": "A user with this email already exists"}


def test_admin_cannot_delete_own_account(admin_client):
    me = admin_client.get("/api/auth/me").json()["user"]

    response = admin_client.delete(f"/api/users/{me['id']}")

    assert response.status_code == 409
    assert response.json() == {"error": "You cannot delete your own account"}


def test_update_and_delete_other_user(admin_client):
    created = admin_client.post("/api/users", json=NEW_USER).json()

    updated = admin_client.put(f"/api/users/{created['id']}", json={"last_name": "Patissier", "password": "new-secret"})
    assert updated.status_code == 200
    assert updated.json()["last_name"] == "Patissier"
    assert updated.json()["first_name"] == "Sous"

    deleted = admin_client.delete(f"/api/users/{created['id']}")
    assert deleted.status_code == 200
    assert admin_client.get(f"/api/users/{created['id']}").status_code == 404


def test_changed_password_is_used_for_login(admin_client):
    created = admin_client.post("/api/users", json=NEW_USER).json()
    admin_client.put(f"/api/users/{created['id']}", json={"password": "new-secret"})
    admin_client.post("/api/auth/logout")

    stale = admin_client.post("/api/auth/login", json={"email": "sous@example.com", "password": "mise-en-place"})
    assert stale.status_code == 401
    login(admin_client, email="sous@example.com", password="new-secret")


def test_deactivated_user_loses_existing_session(admin_client, make_user):
    other = make_user(email="line@example.com", role="admin")
    admin_token = admin_client.cookies.get(settings.SESSION_COOKIE_NAME)

    admin_client.cookies.clear()
    login(admin_client, email="line@example.com")
    other_token = admin_client.cookies.get(settings.SESSION_COOKIE_NAME)

    use_session(admin_client, admin_token)
    assert admin_client.put(f"/api/users/{other.id}", json={"is_active": False}).status_code == 200

    use_session(admin_client, other_token)
    assert admin_client.get("/api/auth/me").status_code == 401


def test_user_routes_require_a_session(client):
    assert client.get("/api/users").status_code == 401
    assert client.post("/api/users", json=NEW_USER).status_code == 401
