import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "kaiheila-webhook"
    assert data["source_type"] == "webhook"
    assert data["encrypted"] is True
    assert data["verify_token"] is True
    assert data["webhook_path"] == "/webhook"
    assert data["tracked_sequence_numbers"] == 0
