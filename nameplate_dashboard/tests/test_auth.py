# nameplate_dashboard/tests/test_auth.py
import jwt
from conftest import JWT_SECRET, PASSWORD, login, make_user

from nameplate_dashboard.db.enums import UserRole


def test_me_requires_cookie(client, database):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Unauthorized"}


def test_login_sets_strict_httponly_cookie(client, officer):
    response = login(client, officer)

    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie

    body = response.get_json()
    assert body["redirect"] == f"/{officer.officer_number}"
    claims = jwt.decode(body["token"], JWT_SECRET, algorithms=["HS256"])
    assert claims["officerNumber"] == officer.officer_number
    assert claims["rmo"] == "RMO1"
    assert claims["role"] == "officer"


def test_login_redirects_by_role(client, admin, reviewer):
    assert login(client, admin).get_json()["redirect"] == "/admin"
    assert login(client, reviewer).get_json()["redirect"] == "/rmo/RMO1"


def test_bad_credentials(client, officer):
    response = client.post("/api/auth/login", json={"email": officer.email, "password": "wrong"})
    assert response.status_code == 401


def test_missing_credentials(client, database):
    assert client.post("/api/auth/login", json={}).status_code == 400


def test_me_returns_account_without_hash(client, officer):
    login(client, officer)
    user = client.get("/api/auth/me").get_json()["user"]
    assert user["email"] == officer.email
    assert user["loginCount"] == 1
    assert "passwordHash" not in user and "password_hash" not in user


def test_logout_clears_session(client, officer):
    login(client, officer)
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_tampered_token_is_rejected(client, officer):
    token = jwt.encode({"id": officer.id, "role": "admin"}, "someone-else", algorithm="HS256")
    client.set_cookie("token", token)
    assert client.get("/api/auth/me").status_code == 401


def test_index_redirects(client, officer):
    assert client.get("/").headers["Location"].endswith("/login")
    login(client, officer)
    assert client.get("/").headers["Location"].endswith(f"/{officer.officer_number}")


def test_register_officer_gets_officer_number(client, database):
    response = client.post("/api/auth/register", json={
        "officerName": "New Officer",
        "email": "new@example.com",
        "password": PASSWORD,
        "mobileNumber": "9876543210",
        "rmo": "RMO5",
    })
    assert response.status_code == 201
    assert response.get_json()["user"]["officerNumber"] == "OFF51"


def test_only_admin_registers_rmo_accounts(client, officer, admin):
    body = {
        "officerName": "Boss", "email": "boss@example.com", "password": PASSWORD,
        "mobileNumber": "9876543210", "rmo": "RMO1", "role": "rmo",
    }
    login(client, officer)
    assert client.post("/api/auth/register", json=body).status_code == 403

    login(client, admin)
    assert client.post("/api/auth/register", json=body).status_code == 201


def test_register_validation_errors(client, database):
    response = client.post("/api/auth/register", json={"email": "not-an-email", "rmo": "RMO1"})
    assert response.status_code == 400
    body = response.get_json()
    assert "Invalid email format" in body["errors"]
    assert "password" in body["missing"]


def test_deactivated_user_cannot_log_in(client, admin):
    user = make_user(UserRole.officer, rmo="RMO3", name="Leaver")
    login(client, admin)
    assert client.post(f"/api/users/{user.id}/toggle-status").get_json()["isActive"] is False

    response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 401


def test_user_admin_routes_require_admin(client, officer):
    login(client, officer)
    assert client.get("/api/users/role/officer").status_code == 403


def test_user_listing_by_role(client, admin, officer):
    login(client, admin)
    users = client.get("/api/users/role/officer").get_json()["users"]
    assert [u["email"] for u in users] == [officer.email]
    assert client.get("/api/users/count/admin").get_json()["count"] == 1
    assert client.get("/api/users/role/wizard").status_code == 400


def test_disabling_an_account_ends_its_session(app, admin, officer):
    officer_client = app.test_client()
    admin_client = app.test_client()
    login(officer_client, officer)
    assert officer_client.get("/api/unverify").status_code == 200

    login(admin_client, admin)
    assert admin_client.post(f"/api/users/{officer.id}/toggle-status").get_json()["isActive"] is False

    assert officer_client.get("/api/unverify").status_code == 401
    assert officer_client.get("/").headers["Location"].endswith("/login")
