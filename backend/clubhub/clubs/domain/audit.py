"""Audit trail for club state transitions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from clubhub.infra.redis import redis_client

STREAM_KEY = "x:clubs.events"
STREAM_MAXLEN = 10_000

logger = logging.getLogger(__name__)


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat()


def _stringify(meta: Dict[str, Any]) -> Dict[str, str]:
	return {key: ("" if value is None else str(value)) for key, value in meta.items()}


async def log_event(event: str, *, user_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> None:
	payload: Dict[str, Any] = {"event": event, "ts": _now_iso()}
	if user_id:
		payload["user_id"] = user_id
	if meta:
		payload.update(_stringify(meta))
	try:
		await redis_client.xadd(STREAM_KEY, payload, maxlen=STREAM_MAXLEN, approximate=True)
	except Exception:
		# The database write already committed; the stream entry is best effort.
		logger.warning("Failed to append audit event", extra={"event": event}, exc_info=True)
