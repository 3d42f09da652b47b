import pytest

from services.auth_service.schemas import UserCreate, UserLogin
from services.auth_service.service import AuthService
from shared.errors import DuplicateEmail, InvalidCredentials
from shared.security import Role, verify_access_token

from conftest import PASSWORD, auth_headers


async def test_register_hashes_password_and_defaults_to_user(make_user):
    user = await make_user()
    assert user.id is not None
    assert user.role is Role.USER
    assert user.hashed_password != PASSWORD
    assert AuthService.verify_password(PASSWORD, user.hashed_password)
    assert user.cart == []


async def test_register_rejects_duplicate_email(make_user):
    await make_user(email="dup@example.com")
    with pytest.raises(DuplicateEmail):
        await make_user(email="dup@example.com")


async def test_login_issues_token_with_role(db_session, make_user):
    user = await make_user(email="admin@example.com", role=Role.ADMIN)
    result = await AuthService.login(db_session, UserLogin(email="admin@example.com", password=PASSWORD))

    payload = verify_access_token(result.token)
    assert payload["sub"] == str(user.id)
    assert payload["role"] == "admin"
    assert result.user.email == "admin@example.com"


async def test_login_failures_are_indistinguishable(db_session, make_user):
    await make_user(email="bob@example.com")

    with pytest.raises(InvalidCredentials) as unknown:
        await AuthService.login(db_session, UserLogin(email="nobody@example.com", password=PASSWORD))
    with pytest.raises(InvalidCredentials) as wrong:
        await AuthService.login(db_session, UserLogin(email="bob@example.com", password="wrong-pass"))
    assert unknown.value.message == wrong.value.message


async def test_register_and_login_over_http(client):
    r = await client.post("/register", json={
        "name": "Carol",
        "email": "carol@example.com",
        "password": PASSWORD,
        "age": 28,
        "address": "9 Elm Road",
        "phone": "555-0199",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["message"]
    assert body["user"]["role"] == "user"
    assert "password" not in body["user"] and "hashedPassword" not in body["user"]

    r = await client.post("/login", json={"email": "carol@example.com", "password": PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["name"] == "Carol"
    assert body["user"]["address"] == "9 Elm Road"

    r = await client.get("/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert r.status_code == 200
    assert r.json()["email"] == "carol@example.com"


async def test_register_cannot_choose_admin_role(client):
    r = await client.post("/register", json={
        "name": "Mallory", "email": "mallory@example.com", "password": PASSWORD, "role": "admin",
    })
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "user"


async def test_register_duplicate_over_http(client, make_user):
    await make_user(email="taken@example.com")
    r = await client.post("/register", json={"name": "X", "email": "taken@example.com", "password": PASSWORD})
    assert r.status_code == 400
    assert "error" in r.json()


async def test_register_validation_error_is_400(client):
    r = await client.post("/register", json={"name": "X", "email": "not-an-email", "password": PASSWORD})
    assert r.status_code == 400
    assert "email" in r.json()["error"]


async def test_login_wrong_password_over_http(client, make_user):
    await make_user(email="dave@example.com")
    r = await client.post("/login", json={"email": "dave@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid email or password"}


async def test_me_requires_token(client):
    r = await client.get("/me")
    assert r.status_code == 401
    r = await client.get("/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


async def test_me_for_token_holder(client, make_user):
    user = await make_user(email="erin@example.com")
    r = await client.get("/me", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["id"] == user.id


async def test_login_with_mixed_case_email_as_registered(client):
    r = await client.post("/register", json={
        "name": "Carol",
        "email": "Carol@Example.COM",
        "password": PASSWORD,
        "address": "9 Elm Road",
    })
    assert r.status_code == 200

    r = await client.post("/login", json={"email": "Carol@Example.COM", "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "Carol@example.com"

    r = await client.post("/login", json={"email": "Carol@example.com", "password": PASSWORD})
    assert r.status_code == 200
