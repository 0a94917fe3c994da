import pytest
from httpx import ASGITransport, AsyncClient

from messenger.domain.exceptions import Conflict, Forbidden, NotFound, ValidationError
from messenger.main import status_for


@pytest.mark.parametrize(
    "exc, expected",
    [
        (ValidationError(), 400),
        (NotFound(), 404),
        (Forbidden(), 403),
        (Conflict(), 409),
    ],
)
def test_status_for(exc, expected):
    assert status_for(exc) == expected


def test_default_messages():
    assert NotFound().message == "Not found"
    assert Forbidden("nope").message == "nope"


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Test Messenger API" in response.json()["message"]


async def test_unexpected_errors_are_hidden(app_with_db):
    @app_with_db.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    transport = ASGITransport(app=app_with_db, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "An unexpected error occurred"}
