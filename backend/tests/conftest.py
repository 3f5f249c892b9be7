import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

# Required secrets must exist before settings are first imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENTRY_PASS_SECRET", "test-entry-pass-secret")

from clubhub.infra import postgres
from clubhub.main import app
from clubhub.settings import settings


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from clubhub.infra.redis import redis_client, set_redis_client
	original = redis_client.client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Ensure a consistent test environment.

	API tests authenticate via X-User-Id/X-User-Email headers, which are only
	accepted in dev mode.
	"""
	original_env = settings.environment
	original_emails = settings.super_admin_emails
	original_ids = settings.super_admin_ids
	original_key = settings.genai_api_key
	settings.environment = "dev"
	settings.super_admin_emails = ("dean@college.edu",)
	settings.super_admin_ids = ()
	settings.genai_api_key = None
	try:
		yield
	finally:
		settings.environment = original_env
		settings.super_admin_emails = original_emails
		settings.super_admin_ids = original_ids
		settings.genai_api_key = original_key


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
