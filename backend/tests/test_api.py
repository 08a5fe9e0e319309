"""HTTP layer: routing, JSON field names, error rendering and the login hook."""
from __future__ import annotations

import jwt
import pytest

from clusterdeck.config import settings
from clusterdeck.models.self_registration_role import SelfRegistrationRole

JWT_TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


async def _create(client, *links):
    response = await client.post("/v1/external-links", json=list(links))
    assert response.status_code == 200, response.text
    return response.json()


async def _list(client, cluster_id=None):
    params = {} if cluster_id is None else {"clusterId": cluster_id}
    response = await client.get("/v1/external-links", params=params)
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_tools_use_wire_field_names(client) -> None:
    response = await client.get("/v1/external-links/tools")

    assert response.status_code == 200
    first = response.json()[0]
    assert set(first) == {"Id", "name", "icon"}
    assert first["name"] == "Grafana"


@pytest.mark.asyncio
async def test_create_echoes_request_and_lists_links(client) -> None:
    body = {"name": "grafana", "url": "https://grafana", "monitoringToolId": 1, "clusterIds": [1, 2]}

    created = await _create(client, body, {"name": "docs", "url": "https://docs", "monitoringToolId": 10})

    assert created[0] == {"id": 0, "name": "grafana", "url": "https://grafana", "active": True,
                          "monitoringToolId": 1, "clusterIds": [1, 2]}
    listed = await _list(client)
    assert {(link["name"], tuple(sorted(link["clusterIds"]))) for link in listed} == {
        ("grafana", (1, 2)),
        ("docs", ()),
    }
    assert all("userId" not in link and "user_id" not in link for link in listed)

    per_cluster = await _list(client, 2)
    assert {(link["name"], tuple(link["clusterIds"])) for link in per_cluster} == {
        ("grafana", (2,)),
        ("docs", ()),
    }


@pytest.mark.asyncio
async def test_update_and_delete(client) -> None:
    await _create(client, {"name": "kibana", "url": "https://kibana", "monitoringToolId": 2, "clusterIds": [1, 2, 3]})
    [link] = await _list(client)

    response = await client.put("/v1/external-links", json={**link, "clusterIds": [2, 4], "url": "https://kibana/2"})
    assert response.status_code == 200, response.text
    [updated] = await _list(client)
    assert updated["url"] == "https://kibana/2"
    assert sorted(updated["clusterIds"]) == [2, 4]

    response = await client.delete("/v1/external-links", params={"id": link["id"]})
    assert response.status_code == 200, response.text
    assert response.json() == {"message": "External link deleted successfully", "cleanupComplete": True,
                               "cleanupFailures": []}
    assert await _list(client) == []


@pytest.mark.asyncio
async def test_update_missing_link_renders_not_found(client) -> None:
    response = await client.put("/v1/external-links", json={"id": 404, "name": "x", "url": "https://x"})

    assert response.status_code == 404
    assert response.json()["userMessage"] == "No matching entry found for update."


@pytest.mark.asyncio
async def test_delete_missing_link_renders_not_found(client) -> None:
    response = await client.delete("/v1/external-links", params={"id": 404})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_self_register_check_and_roles(client, session) -> None:
    response = await client.get("/v1/self-register/check")
    assert response.json() == {"enabled": False}

    session.add_all([SelfRegistrationRole(role="role:viewer"), SelfRegistrationRole(role="")])
    await session.commit()

    response = await client.get("/v1/self-register/check")
    assert response.json() == {"enabled": True}
    response = await client.get("/v1/self-register/roles")
    assert response.json() == ["role:viewer"]


@pytest.fixture
def auth_enabled(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_ENABLED", True)
    monkeypatch.setattr(settings, "JWT_SECRET", JWT_TEST_SECRET)


def _bearer(email: str) -> dict:
    token = jwt.encode({"email": email}, JWT_TEST_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_auth_rejects_missing_and_invalid_tokens(client, auth_enabled) -> None:
    response = await client.get("/v1/external-links")
    assert response.status_code == 401

    response = await client.get("/v1/external-links", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_without_default_roles_is_forbidden(client, auth_enabled) -> None:
    response = await client.get("/v1/external-links", headers=_bearer("stranger@example.com"))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_user_is_self_registered_on_first_request(client, session, auth_enabled) -> None:
    session.add(SelfRegistrationRole(role="role:viewer"))
    await session.commit()

    response = await client.get("/v1/external-links", headers=_bearer("newcomer@example.com"))
    assert response.status_code == 200, response.text

    response = await client.post(
        "/v1/external-links",
        json=[{"name": "loki", "url": "https://loki", "monitoringToolId": 6}],
        headers=_bearer("newcomer@example.com"),
    )
    assert response.status_code == 200, response.text
