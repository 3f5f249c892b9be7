"""Centralised JWT helpers for access tokens issued by the auth provider.

Uses HS256 with the application's secret key. Validates standard claims
and the configured issuer/audience values.
"""

from __future__ import annotations

import time
from typing import Any, Dict

import jwt
from jwt import InvalidTokenError

from clubhub.settings import settings


def encode_access(payload: dict[str, object], *, ttl_seconds: int = 3600) -> str:
	"""Encode an access token with issuer/audience defaults (dev tooling and tests)."""
	now = int(time.time())
	body: Dict[str, Any] = {
		"iss": settings.auth_issuer,
		"aud": settings.auth_audience,
		"iat": now,
		"exp": now + ttl_seconds,
	}
	body.update(payload)
	return jwt.encode(body, settings.secret_key, algorithm="HS256")


def decode_access(token: str) -> dict[str, object]:
	"""Decode and validate an access token.

	Raises jwt.InvalidTokenError subclasses on failure.
	"""
	options = {"require": ["exp", "iat", "iss", "aud", "sub"]}
	payload = jwt.decode(
		token,
		settings.secret_key,
		algorithms=["HS256"],
		audience=settings.auth_audience,
		issuer=settings.auth_issuer,
		leeway=5,
		options=options,
	)
	if not str(payload.get("sub") or "").strip():
		raise InvalidTokenError("missing_claim:sub")
	return payload  # type: ignore[return-value]
