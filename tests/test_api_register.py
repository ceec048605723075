# tests/test_api_register.py
import pytest
from sqlalchemy import func, select

from account_service import models

pytestmark = pytest.mark.asyncio


async def count_users(session_factory, email):
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(models.User).filter(models.User.email == email)
        )
        return result.scalar()


async def test_register_ok(client, candidate_data):
    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 200
    body = r.json()
    assert body["id"] == 0
    assert body["name"] == "Jakub"
    assert body["lastname"] == "Kaiser"
    assert body["email"] == "kuba@acme.com"
    assert "password" not in body
    assert "hashed_password" not in body


async def test_second_user_gets_next_id(client, candidate_data):
    await client.post("/register", json=candidate_data)
    r = await client.post("/register", json=dict(candidate_data, email="anna@acme.com"))

    assert r.status_code == 200
    assert r.json()["id"] == 1


async def test_name_missing(client, candidate_data):
    candidate_data["name"] = ""
    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 400
    assert r.json() == {"errors": ["name must not be empty"]}


async def test_missing_name_and_short_password(client, candidate_data):
    candidate_data.update(name="", password="123")
    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 400
    assert r.json()["errors"] == [
        "name must not be empty",
        "Password must be at least 12 characters long",
    ]


async def test_password_too_short(client, candidate_data):
    candidate_data["password"] = "123"
    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 400
    assert "Password must be at least 12 characters long" in r.json()["errors"]


async def test_wrong_email_domain(client, session_factory, candidate_data):
    candidate_data["email"] = "kuba@gmail.com"
    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 400
    assert r.json() == {"errors": ["email domain is not allowed"]}
    assert await count_users(session_factory, "kuba@gmail.com") == 0


async def test_user_exists(client, session_factory, candidate_data):
    first = await client.post("/register", json=candidate_data)
    assert first.status_code == 200

    r = await client.post("/register", json=dict(candidate_data, lastname="Other"))

    assert r.status_code == 400
    assert r.json() == {"error": "user_exists", "message": "User exists"}
    assert await count_users(session_factory, "kuba@acme.com") == 1


async def test_empty_json_body(client):
    r = await client.post("/register", content="", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json()["error"] == "malformed_request"


async def test_no_body(client):
    r = await client.post("/register")

    assert r.status_code == 400


@pytest.mark.parametrize("content", [b"{not json", b"[1, 2, 3]", b'"Jakub"', b'{"name": 5}'])
async def test_malformed_body(client, content):
    r = await client.post("/register", content=content, headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json()["error"] == "malformed_request"


async def test_service_remains_available_after_errors(client, candidate_data):
    await client.post("/register", content=b"{oops")
    await client.post("/register", json=dict(candidate_data, name=""))

    r = await client.post("/register", json=candidate_data)

    assert r.status_code == 200
    assert r.json()["id"] == 0


@pytest.mark.parametrize("variant", ["kuba@ACME.com", "Kuba@acme.com", "KUBA@Acme.Com"])
async def test_user_exists_regardless_of_email_case(client, session_factory, candidate_data, variant):
    first = await client.post("/register", json=candidate_data)
    assert first.status_code == 200

    r = await client.post("/register", json=dict(candidate_data, email=variant))

    assert r.status_code == 400
    assert r.json() == {"error": "user_exists", "message": "User exists"}
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(models.User))
        assert result.scalar() == 1


async def test_mixed_case_email_is_stored_normalized(client, candidate_data):
    r = await client.post("/register", json=dict(candidate_data, email="Kuba@ACME.com"))

    assert r.status_code == 200
    assert r.json()["email"] == "kuba@acme.com"
