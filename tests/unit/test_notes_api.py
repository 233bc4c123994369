"""
Notes API Unit Tests

Exercises the HTTP surface through httpx.ASGITransport: auth gate,
status codes per error kind, sparse PATCH and summaries.
"""

import pytest

from quillnote.core.security import create_access_token

BASE = "/api/v1/notes"


async def _create(client, headers, title="Groceries", content=""):
    response = await client.post(
        f"{BASE}/", json={"title": title, "content": content}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", f"{BASE}/"),
        ("GET", f"{BASE}/some-id"),
        ("POST", f"{BASE}/"),
        ("PATCH", f"{BASE}/some-id"),
        ("DELETE", f"{BASE}/some-id"),
        ("POST", f"{BASE}/some-id/summarize"),
    ],
)
async def test_every_operation_requires_a_session(api_client, method, path):
    response = await api_client.request(method, path, json={"title": "x"})

    assert response.status_code == 401
    assert response.json()["type"] == "Unauthenticated"


@pytest.mark.asyncio
async def test_invalid_token_is_unauthenticated(api_client):
    response = await api_client.get(
        f"{BASE}/", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_create_and_get(api_client, alice_headers):
    created = await _create(api_client, alice_headers)

    assert created["owner_id"] == "user-alice"
    assert created["created_at"] == created["updated_at"]

    response = await api_client.get(f"{BASE}/{created['id']}", headers=alice_headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Groceries"


@pytest.mark.asyncio
async def test_create_rejects_empty_title(api_client, alice_headers):
    response = await api_client.post(
        f"{BASE}/", json={"title": "", "content": "x"}, headers=alice_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_whitespace_title_is_validation_failed(api_client, alice_headers):
    response = await api_client.post(
        f"{BASE}/", json={"title": "   ", "content": ""}, headers=alice_headers
    )
    assert response.status_code == 422
    assert response.json()["type"] == "ValidationFailed"


@pytest.mark.asyncio
async def test_patch_only_touches_supplied_fields(api_client, alice_headers):
    created = await _create(api_client, alice_headers, "Title", "<p>Body</p>")

    response = await api_client.patch(
        f"{BASE}/{created['id']}", json={"title": "Groceries v2"}, headers=alice_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Groceries v2"
    assert body["content"] == "<p>Body</p>"
    assert body["updated_at"] > body["created_at"]


@pytest.mark.asyncio
async def test_missing_and_foreign_notes_have_distinct_errors(
    api_client, alice_headers, bob_headers
):
    created = await _create(api_client, alice_headers, "Private", "secret")

    missing = await api_client.get(f"{BASE}/nope", headers=alice_headers)
    assert missing.status_code == 404
    assert missing.json()["type"] == "NoteNotFound"

    foreign = await api_client.get(f"{BASE}/{created['id']}", headers=bob_headers)
    assert foreign.status_code == 403
    assert foreign.json()["type"] == "NoteUnauthorized"
    assert "secret" not in foreign.text

    patch = await api_client.patch(
        f"{BASE}/{created['id']}", json={"title": "stolen"}, headers=bob_headers
    )
    assert patch.status_code == 403

    delete = await api_client.delete(f"{BASE}/{created['id']}", headers=bob_headers)
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_list_only_returns_own_notes(api_client, alice_headers, bob_headers):
    await _create(api_client, alice_headers, "Alice 1")
    await _create(api_client, alice_headers, "Alice 2")
    await _create(api_client, bob_headers, "Bob 1")

    response = await api_client.get(f"{BASE}/", headers=alice_headers)

    assert response.status_code == 200
    assert [n["title"] for n in response.json()] == ["Alice 2", "Alice 1"]

    stranger = {"Authorization": f"Bearer {create_access_token('user-carol')}"}
    response = await api_client.get(f"{BASE}/", headers=stranger)
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_search(api_client, alice_headers):
    await _create(api_client, alice_headers, "Groceries", "milk")
    await _create(api_client, alice_headers, "Work", "deadline")

    response = await api_client.get(
        f"{BASE}/", params={"q": "dead"}, headers=alice_headers
    )
    assert [n["title"] for n in response.json()] == ["Work"]


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found(api_client, alice_headers):
    created = await _create(api_client, alice_headers)

    response = await api_client.delete(f"{BASE}/{created['id']}", headers=alice_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    again = await api_client.delete(f"{BASE}/{created['id']}", headers=alice_headers)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_summarize(api_client, alice_headers, summarizer):
    created = await _create(api_client, alice_headers, "Standup", "Ship it")

    response = await api_client.post(
        f"{BASE}/{created['id']}/summarize",
        json={"format": "bullet-points"},
        headers=alice_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"content": "bullet-points: Ship it", "format": "bullet-points"}
    assert len(summarizer.calls) == 1


@pytest.mark.asyncio
async def test_summarize_rejects_unknown_format(api_client, alice_headers, summarizer):
    created = await _create(api_client, alice_headers, "Standup", "Ship it")

    response = await api_client.post(
        f"{BASE}/{created['id']}/summarize",
        json={"format": "haiku"},
        headers=alice_headers,
    )
    assert response.status_code == 422
    assert summarizer.calls == []


@pytest.mark.asyncio
async def test_summarize_provider_failure_is_502(api_client, alice_headers, summarizer):
    created = await _create(api_client, alice_headers, "Standup", "Ship it")
    summarizer.fail = True

    response = await api_client.post(
        f"{BASE}/{created['id']}/summarize",
        json={"format": "executive"},
        headers=alice_headers,
    )
    assert response.status_code == 502
    assert response.json()["type"] == "SummarizationFailed"
