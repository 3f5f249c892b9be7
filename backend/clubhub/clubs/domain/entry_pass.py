"""Signed entry passes carried by event registrations.

A pass is ``base64url(user_id|event_id|issued_at).hex_hmac_sha256`` keyed by
``ENTRY_PASS_SECRET``. The stored registration row remains the source of
truth; the signature only makes the string tamper-evident.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import time
from dataclasses import dataclass
from uuid import UUID

from clubhub.clubs.domain.exceptions import ValidationError
from clubhub.settings import settings


@dataclass(slots=True, frozen=True)
class EntryPass:
	user_id: str
	event_id: UUID
	issued_at: int


def _b64url_encode(raw: bytes) -> str:
	return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _b64url_decode(text: str) -> bytes:
	pad = "=" * (-len(text) % 4)
	return base64.urlsafe_b64decode(text + pad)


def _sign(body: str, secret: str) -> str:
	return hmac.new(secret.encode(), body.encode(), hashlib.sha256).hexdigest()


def issue(user_id: str, event_id: UUID, *, issued_at: int | None = None, secret: str | None = None) -> str:
	stamp = int(time.time()) if issued_at is None else int(issued_at)
	body = _b64url_encode(f"{user_id}|{event_id}|{stamp}".encode())
	return f"{body}.{_sign(body, secret or settings.entry_pass_secret)}"


def verify(token: str, *, secret: str | None = None) -> EntryPass:
	"""Return the decoded pass or raise ValidationError when it is malformed or forged."""
	body, sep, signature = (token or "").strip().partition(".")
	if not sep or not body or not signature:
		raise ValidationError("entry_pass_malformed")
	expected = _sign(body, secret or settings.entry_pass_secret)
	if not hmac.compare_digest(expected, signature):
		raise ValidationError("entry_pass_bad_signature")
	try:
		decoded = _b64url_decode(body).decode()
		user_id, event_raw, issued_raw = decoded.rsplit("|", 2)
		return EntryPass(user_id=user_id, event_id=UUID(event_raw), issued_at=int(issued_raw))
	except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
		raise ValidationError("entry_pass_malformed") from exc
