"""Liveness and readiness checks for the API."""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, Dict, Tuple

from clubhub.infra import migrate, postgres
from clubhub.infra.redis import redis_client
from clubhub.obs import metrics
from clubhub.settings import settings

LOGGER = logging.getLogger(__name__)


async def _redis_status(timeout: float = 0.2) -> Dict[str, Any]:
	start = perf_counter()
	try:
		await asyncio.wait_for(redis_client.ping(), timeout=timeout)
		latency = perf_counter() - start
		metrics.mark_redis(True, latency_seconds=latency)
		return {"ok": True, "latency_ms": round(latency * 1000, 2)}
	except Exception as exc:  # pragma: no cover - depends on runtime
		metrics.mark_redis(False)
		LOGGER.warning("Redis readiness check failed", exc_info=True)
		return {"ok": False, "error": str(exc)}


async def _postgres_status(timeout: float = 0.3) -> Tuple[Dict[str, Any], Any]:
	try:
		pool = await postgres.get_pool()
	except Exception as exc:  # pragma: no cover - connection bootstrap failure
		metrics.mark_postgres(False)
		LOGGER.warning("Postgres connection unavailable", exc_info=True)
		return ({"ok": False, "error": str(exc)}, None)

	start = perf_counter()
	try:
		async with pool.acquire() as conn:
			await asyncio.wait_for(conn.execute("SELECT 1"), timeout=timeout)
		latency = perf_counter() - start
		metrics.mark_postgres(True, latency_seconds=latency)
		return ({"ok": True, "latency_ms": round(latency * 1000, 2)}, pool)
	except Exception as exc:  # pragma: no cover - depends on runtime
		metrics.mark_postgres(False)
		LOGGER.warning("Postgres readiness query failed", exc_info=True)
		return ({"ok": False, "error": str(exc)}, pool)


def _required_migration() -> str | None:
	"""Explicit override, else the newest migration bundled with this build."""
	if settings.health_min_migration:
		return settings.health_min_migration
	bundled = migrate.discover()
	return bundled[-1][0] if bundled else None


async def _migration_status(pool, min_version: str | None = None) -> Dict[str, Any]:
	if min_version is None:
		min_version = _required_migration()
	if pool is None:
		return {"ok": False, "error": "pool_unavailable"}
	try:
		async with pool.acquire() as conn:
			version = await conn.fetchval(
				"SELECT version FROM schema_migrations ORDER BY version DESC LIMIT 1"
			)
	except Exception as exc:  # pragma: no cover - optional table
		return {"ok": False, "error": str(exc)}
	if version is None:
		return {"ok": False, "error": "no_migrations"}
	current = str(version)
	pending = [bundled for bundled, _ in migrate.discover() if bundled > current]
	ok = min_version is None or current >= min_version
	return {"ok": ok, "version": current, "required": min_version, "pending": pending}


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def readiness() -> Tuple[int, Dict[str, Any]]:
	redis_state = await _redis_status()
	postgres_state, pool = await _postgres_status()
	migration_state = await _migration_status(pool)
	ok = redis_state.get("ok") and postgres_state.get("ok") and migration_state.get("ok")
	status_code = 200 if ok else 503
	return (
		status_code,
		{
			"status": "ok" if ok else "degraded",
			"checks": {
				"redis": redis_state,
				"postgres": postgres_state,
				"migrations": migration_state,
			},
		},
	)
