from datetime import timedelta

from fastapi.testclient import TestClient

from backend.security import INVALID_TOKEN, MISSING_TOKEN, create_user_token


def test_register_then_login(client: TestClient):
    """Register, log in, and use the token."""
    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 201
    assert "token" not in response.json()

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["token_type"] == "bearer"

    response = client.get("/api/profile", headers={"Authorization": f"Bearer {data['token']}"})
    assert response.status_code == 200
    assert response.json()["email"] == "a@x.com"


def test_register_duplicate_email(client: TestClient, test_user):
    response = client.post("/api/auth/register", json={"email": test_user.email, "password": "whatever"})
    assert response.status_code == 409
    assert response.json()["message"]


def test_register_email_is_case_sensitive(client: TestClient, test_user):
    response = client.post("/api/auth/register", json={"email": "TEST@example.com", "password": "secret1"})
    assert response.status_code == 201


def test_register_validation(client: TestClient):
    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "12345"})
    assert response.status_code == 400
    assert "6 characters" in response.json()["message"]

    response = client.post("/api/auth/register", json={"email": "a@x.com"})
    assert response.status_code == 400

    response = client.post("/api/auth/register", json={"password": "secret1"})
    assert response.status_code == 400


def test_login_invalid_credentials_are_indistinguishable(client: TestClient, test_user):
    """Wrong password and unknown email give the same answer."""
    wrong_password = client.post("/api/auth/login", json={"email": test_user.email, "password": "wrong"})
    unknown_email = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "testpassword"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Incorrect email or password."


def test_login_missing_fields(client: TestClient):
    response = client.post("/api/auth/login", json={"email": "a@x.com"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email and password are required."


def test_access_without_token(client: TestClient):
    """Protected endpoints reject requests without a token."""
    for path in ("/api/todos", "/api/categories", "/api/tags", "/api/reminders",
                 "/api/reminders/due", "/api/dashboard", "/api/profile"):
        response = client.get(path)
        assert response.status_code == 401, f"Expected 401 for {path}, got {response.status_code}"
        assert response.json()["message"] == MISSING_TOKEN
        assert response.headers["www-authenticate"] == "Bearer"


def test_access_with_invalid_token(client: TestClient):
    response = client.get("/api/todos", headers={"Authorization": "Bearer invalid_token"})
    assert response.status_code == 401
    assert response.json()["message"] == INVALID_TOKEN


def test_access_with_expired_token(client: TestClient, test_user):
    token = create_user_token(test_user.id, test_user.email, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/todos", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == INVALID_TOKEN


def test_root_is_public(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_token_must_match_stored_email(client: TestClient, test_user, other_user):
    token = create_user_token(test_user.id, other_user.email)

    response = client.get("/api/todos", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == INVALID_TOKEN


def test_token_for_unknown_user(client: TestClient):
    token = create_user_token(9999, "ghost@x.com")

    response = client.get("/api/todos", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == INVALID_TOKEN
