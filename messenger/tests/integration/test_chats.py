import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def start_chat(client, user, other):
    response = await client.post(
        f"{API}/chats/", headers=user["headers"], json={"participant_id": other["id"]}
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_start_private_chat(client: AsyncClient, alice, bob):
    chat = await start_chat(client, alice, bob)
    assert chat["type"] == "private"
    assert chat["name"] is None
    assert {p["user_id"] for p in chat["participants"]} == {alice["id"], bob["id"]}
    assert all(p["role"] == "member" for p in chat["participants"])
    assert chat["last_message"] is None
    assert chat["unread_count"] == 0


async def test_start_private_chat_twice_returns_same_chat(client: AsyncClient, alice, bob):
    first = await start_chat(client, alice, bob)
    second = await start_chat(client, alice, bob)
    assert first["id"] == second["id"]


async def test_private_chat_is_shared_from_both_sides(client: AsyncClient, alice, bob):
    from_alice = await start_chat(client, alice, bob)
    from_bob = await start_chat(client, bob, alice)
    assert from_alice["id"] == from_bob["id"]


async def test_start_private_chat_with_self(client: AsyncClient, alice):
    response = await client.post(
        f"{API}/chats/", headers=alice["headers"], json={"participant_id": alice["id"]}
    )
    assert response.status_code == 400


async def test_start_private_chat_with_unknown_user(client: AsyncClient, alice):
    response = await client.post(
        f"{API}/chats/", headers=alice["headers"], json={"participant_id": "ghost"}
    )
    assert response.status_code == 404


async def test_start_private_chat_requires_participant(client: AsyncClient, alice):
    response = await client.post(f"{API}/chats/", headers=alice["headers"], json={})
    assert response.status_code == 400


async def test_start_private_chat_accepts_camel_case(client: AsyncClient, alice, bob):
    response = await client.post(
        f"{API}/chats/", headers=alice["headers"], json={"participantId": bob["id"]}
    )
    assert response.status_code == 200, response.text
    assert {p["user_id"] for p in response.json()["participants"]} == {
        alice["id"],
        bob["id"],
    }


async def test_private_chats_of_ids_with_separators(client: AsyncClient, make_auth_header):
    users = {}
    for user_id in ("a:b", "c", "a", "b:c"):
        headers = make_auth_header(user_id)
        response = await client.get(f"{API}/profile/", headers=headers)
        assert response.status_code == 200, response.text
        users[user_id] = {"id": user_id, "headers": headers}

    first = await start_chat(client, users["a:b"], users["c"])
    second = await start_chat(client, users["a"], users["b:c"])

    assert first["id"] != second["id"]
    assert {p["user_id"] for p in second["participants"]} == {"a", "b:c"}
    response = await client.get(
        f"{API}/chats/{second['id']}", headers=users["b:c"]["headers"]
    )
    assert response.status_code == 200


async def test_get_chat_details(client: AsyncClient, alice, bob):
    chat = await start_chat(client, alice, bob)
    response = await client.get(f"{API}/chats/{chat['id']}", headers=bob["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == chat["id"]
    profiles = {p["user_id"]: p["profile"] for p in data["participants"]}
    assert profiles[alice["id"]]["tag"] == alice["profile"]["tag"]


async def test_get_chat_as_outsider(client: AsyncClient, alice, bob, carol):
    chat = await start_chat(client, alice, bob)
    response = await client.get(f"{API}/chats/{chat['id']}", headers=carol["headers"])
    assert response.status_code == 403


async def test_get_unknown_chat(client: AsyncClient, alice):
    response = await client.get(f"{API}/chats/missing", headers=alice["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Chat not found"


async def test_list_chats_most_recent_first(client: AsyncClient, alice, bob, carol):
    with_bob = await start_chat(client, alice, bob)
    with_carol = await start_chat(client, alice, carol)
    await client.post(
        f"{API}/chats/{with_bob['id']}/messages",
        headers=bob["headers"],
        json={"content": "ping"},
    )

    response = await client.get(f"{API}/chats/", headers=alice["headers"])
    assert response.status_code == 200
    chats = response.json()
    assert [c["id"] for c in chats] == [with_bob["id"], with_carol["id"]]
    assert chats[0]["last_message"]["content"] == "ping"
    assert chats[0]["unread_count"] == 1
    assert chats[1]["unread_count"] == 0


async def test_list_chats_only_own(client: AsyncClient, alice, bob, carol):
    await start_chat(client, alice, bob)
    response = await client.get(f"{API}/chats/", headers=carol["headers"])
    assert response.json() == []


async def test_cannot_leave_private_chat(client: AsyncClient, alice, bob):
    chat = await start_chat(client, alice, bob)
    response = await client.delete(
        f"{API}/groups/{chat['id']}/members/{alice['id']}", headers=alice["headers"]
    )
    assert response.status_code == 403


async def test_cannot_add_members_to_private_chat(client: AsyncClient, alice, bob, carol):
    chat = await start_chat(client, alice, bob)
    response = await client.post(
        f"{API}/groups/{chat['id']}/members",
        headers=alice["headers"],
        json={"member_ids": [carol["id"]]},
    )
    assert response.status_code == 403

    details = await client.get(f"{API}/chats/{chat['id']}", headers=alice["headers"])
    assert len(details.json()["participants"]) == 2
