import pytest

from clubhub.settings import settings


@pytest.mark.asyncio
async def test_liveness(api_client):
	resp = await api_client.get("/health/live")
	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_metrics_fail_closed_without_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_admin_token", None)
	monkeypatch.setattr(settings, "obs_metrics_public", False)

	resp = await api_client.get("/metrics")
	assert resp.status_code == 403
	assert resp.json()["detail"] == "admin_token_not_configured"


@pytest.mark.asyncio
async def test_metrics_reject_wrong_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_admin_token", "secret-token")
	monkeypatch.setattr(settings, "obs_metrics_public", False)

	resp = await api_client.get("/metrics", headers={"X-Admin-Token": "wrong"})
	assert resp.status_code == 403
	assert resp.json()["detail"] == "forbidden"


@pytest.mark.asyncio
async def test_metrics_with_bearer_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_admin_token", "secret-token")

	resp = await api_client.get("/metrics", headers={"Authorization": "Bearer secret-token"})
	assert resp.status_code == 200
	assert "clubhub" in resp.text
