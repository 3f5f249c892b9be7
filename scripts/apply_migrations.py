"""Apply pending clubhub SQL migrations against POSTGRES_URL."""

from __future__ import annotations

import asyncio
import sys

import asyncpg

from clubhub.infra import migrate, postgres
from clubhub.obs.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def wait_for_pool(retries: int = 30, delay: float = 2.0) -> asyncpg.Pool:
	for attempt in range(1, retries + 1):
		try:
			return await postgres.get_pool()
		except (OSError, asyncpg.CannotConnectNowError):
			logger.info("database_starting", extra={"attempt": attempt, "retries": retries, "delay": delay})
			await asyncio.sleep(delay)
	raise SystemExit("Could not connect to database after multiple retries")


async def main() -> None:
	configure_logging()
	pool = await wait_for_pool()
	try:
		async with pool.acquire() as conn:
			applied = await migrate.apply_pending(conn)
	finally:
		await postgres.close_pool()
	if applied:
		logger.info("migrations_applied", extra={"versions": applied})
	else:
		logger.info("schema_up_to_date")


if __name__ == "__main__":
	if sys.platform == "win32":
		asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
	asyncio.run(main())
