"""Apply the bundled SQL migrations and record them in schema_migrations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import asyncpg

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

logger = logging.getLogger(__name__)

_BOOKKEEPING = """
CREATE TABLE IF NOT EXISTS schema_migrations (
	version TEXT PRIMARY KEY,
	applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


def discover(directory: Path = MIGRATIONS_DIR) -> list[tuple[str, Path]]:
	"""Return (version, path) pairs sorted by version; the version is the filename prefix."""
	found: list[tuple[str, Path]] = []
	for path in sorted(directory.glob("*.sql")):
		version = path.stem.split("_", 1)[0]
		found.append((version, path))
	return found


async def apply_pending(
	conn: asyncpg.Connection,
	migrations: Iterable[tuple[str, Path]] | None = None,
) -> list[str]:
	await conn.execute(_BOOKKEEPING)
	rows = await conn.fetch("SELECT version FROM schema_migrations")
	applied = {row["version"] for row in rows}
	newly_applied: list[str] = []
	for version, path in migrations if migrations is not None else discover():
		if version in applied:
			continue
		sql = path.read_text(encoding="utf-8")
		async with conn.transaction():
			await conn.execute(sql)
			await conn.execute("INSERT INTO schema_migrations (version) VALUES ($1)", version)
		logger.info("migration_applied", extra={"version": version, "file": path.name})
		newly_applied.append(version)
	return newly_applied
