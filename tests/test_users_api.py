"""
API tests for user management.
"""

from auth import security


def test_create_user_hashes_password_and_hides_it(client, store, auth_headers) -> None:
    resp = client.post(
        "/api/users",
        json={"email": "Editor@Example.com", "password": "secret123", "name": "Editor"},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert set(data) == {"id", "email", "name", "createdAt", "updatedAt"}
    assert data["email"] == "editor@example.com"

    stored = store.users[data["id"]]
    assert stored["password_hash"] != "secret123"
    assert security.verify_password("secret123", stored["password_hash"])


def test_create_user_with_registered_email_is_409_without_write(client, store, admin_user, auth_headers) -> None:
    resp = client.post(
        "/api/users",
        json={"email": "ADMIN@example.com", "password": "secret123"},
        headers=auth_headers,
    )

    assert resp.status_code == 409
    assert ("users", "insert") not in store.writes
    assert len(store.users) == 1


def test_create_user_validation(client, store, auth_headers) -> None:
    resp = client.post("/api/users", json={"email": "bad", "password": "123"}, headers=auth_headers)

    assert resp.status_code == 400
    assert {"email", "password"} <= set(resp.json()["errors"])


def test_list_and_search_users(client, store, admin_user, auth_headers) -> None:
    store.add_user("dina@example.com", name="Dina")
    store.add_user("eko@example.com", name="Eko")

    all_users = client.get("/api/users", headers=auth_headers).json()["data"]
    assert [u["email"] for u in all_users] == ["eko@example.com", "dina@example.com", "admin@example.com"]

    found = client.get("/api/users?q=DIN", headers=auth_headers).json()["data"]
    assert [u["email"] for u in found] == ["dina@example.com"]


def test_update_user_partial(client, store, auth_headers) -> None:
    user = store.add_user("dina@example.com", name="Dina")

    resp = client.put(f"/api/users/{user['id']}", json={"name": None}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] is None
    assert store.users[user["id"]]["email"] == "dina@example.com"

    resp = client.put(f"/api/users/{user['id']}", json={"password": "newsecret"}, headers=auth_headers)
    assert resp.status_code == 200
    assert security.verify_password("newsecret", store.users[user["id"]]["password_hash"])


def test_update_user_email_conflict(client, store, admin_user, auth_headers) -> None:
    user = store.add_user("dina@example.com")

    resp = client.put(f"/api/users/{user['id']}", json={"email": "admin@example.com"}, headers=auth_headers)

    assert resp.status_code == 409
    assert store.users[user["id"]]["email"] == "dina@example.com"


def test_update_user_keeping_own_email_is_allowed(client, store, auth_headers) -> None:
    user = store.add_user("dina@example.com")

    resp = client.put(f"/api/users/{user['id']}", json={"email": "DINA@example.com"}, headers=auth_headers)
    assert resp.status_code == 200


def test_update_user_requires_a_field(client, store, auth_headers) -> None:
    user = store.add_user("dina@example.com")

    resp = client.put(f"/api/users/{user['id']}", json={}, headers=auth_headers)
    assert resp.status_code == 400
    assert store.writes == []


def test_get_and_delete_user(client, store, auth_headers) -> None:
    user = store.add_user("dina@example.com")

    assert client.get(f"/api/users/{user['id']}", headers=auth_headers).json()["data"]["email"] == "dina@example.com"
    resp = client.delete(f"/api/users/{user['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "User deleted."}
    assert client.get(f"/api/users/{user['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"/api/users/{user['id']}", headers=auth_headers).status_code == 404


def test_password_over_bcrypt_limit_is_400_on_create(client, store, admin_user, auth_headers) -> None:
    resp = client.post(
        "/api/users",
        json={"email": "long@example.com", "password": "p" * 100},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert "password" in resp.json()["errors"]
    assert store.writes == []


def test_multibyte_password_over_bcrypt_limit_is_400_on_update(client, store, auth_headers) -> None:
    user = store.add_user("dina@example.com", name="Dina")

    resp = client.put(f"/api/users/{user['id']}", json={"password": "\U0001F600" * 20}, headers=auth_headers)

    assert resp.status_code == 400
    assert "password" in resp.json()["errors"]
    assert store.writes == []


def test_password_at_bcrypt_limit_is_accepted(client, store, auth_headers) -> None:
    resp = client.post(
        "/api/users",
        json={"email": "edge@example.com", "password": "p" * 72},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    stored = store.users[resp.json()["data"]["id"]]
    assert security.verify_password("p" * 72, stored["password_hash"])
