"""Authorization and validation policies for club operations."""

from __future__ import annotations

from datetime import datetime, timezone

from clubhub.clubs.domain import models
from clubhub.clubs.domain.exceptions import (
	AuthorizationError,
	InvalidStateError,
	ValidationError,
)
from clubhub.settings import settings

CLUB_NAME_MIN = 3
CLUB_DESCRIPTION_MIN = 10
EVENT_NAME_MIN = 3
EVENT_DESCRIPTION_MIN = 10
EVENT_LOCATION_MIN = 3
ANNOUNCEMENT_TITLE_MIN = 3
ANNOUNCEMENT_CONTENT_MIN = 10

DECISIONS = {"approved", "rejected"}
EVENT_SCOPES = {"upcoming", "past", "all"}


def _require_length(value: str | None, minimum: int, code: str) -> str:
	text = (value or "").strip()
	if len(text) < minimum:
		raise ValidationError(code)
	return text


def is_global_admin(user: models.UserProfile | None) -> bool:
	"""Global admins carry role=admin and appear on the configured allow-list."""
	if user is None or user.role != "admin":
		return False
	if user.id in settings.super_admin_ids:
		return True
	return user.email.lower() in settings.super_admin_emails


def is_on_admin_allow_list(user_id: str, email: str | None) -> bool:
	if user_id in settings.super_admin_ids:
		return True
	return bool(email) and email.lower() in settings.super_admin_emails


def assert_global_admin(user: models.UserProfile | None) -> None:
	if not is_global_admin(user):
		raise AuthorizationError("global_admin_required")


def is_club_admin(club: models.Club, user_id: str) -> bool:
	return club.admin_id == user_id


def assert_club_admin(club: models.Club, user_id: str) -> None:
	if not is_club_admin(club, user_id):
		raise AuthorizationError("club_admin_required")


def assert_club_admin_or_global(club: models.Club, user: models.UserProfile | None, user_id: str) -> None:
	if is_club_admin(club, user_id) or is_global_admin(user):
		return
	raise AuthorizationError("club_admin_required")


def ensure_club_approved(club: models.Club) -> None:
	if not club.is_approved:
		raise InvalidStateError("club_not_approved")


def ensure_club_fields(name: str | None, description: str | None) -> tuple[str, str]:
	return (
		_require_length(name, CLUB_NAME_MIN, "club_name_too_short"),
		_require_length(description, CLUB_DESCRIPTION_MIN, "club_description_too_short"),
	)


def ensure_decision(decision: str) -> str:
	value = (decision or "").strip().lower()
	if value not in DECISIONS:
		raise ValidationError("invalid_decision")
	return value


def ensure_event_name(name: str | None) -> str:
	return _require_length(name, EVENT_NAME_MIN, "event_name_too_short")


def ensure_event_description(description: str | None) -> str:
	return _require_length(description, EVENT_DESCRIPTION_MIN, "event_description_too_short")


def ensure_event_location(location: str | None) -> str:
	return _require_length(location, EVENT_LOCATION_MIN, "event_location_too_short")


def ensure_future_datetime(value: datetime | None, *, now: datetime | None = None) -> datetime:
	if value is None:
		raise ValidationError("event_datetime_required")
	if value.tzinfo is None:
		raise ValidationError("event_datetime_timezone_required")
	reference = now or datetime.now(timezone.utc)
	if value <= reference:
		raise ValidationError("event_datetime_in_past")
	return value.astimezone(timezone.utc)


def ensure_event_scope(scope: str | None) -> str:
	value = scope or "upcoming"
	if value not in EVENT_SCOPES:
		raise ValidationError("invalid_scope")
	return value


def ensure_event_open(event: models.ClubEvent, *, now: datetime | None = None) -> None:
	if event.is_past(now):
		raise InvalidStateError("event_in_past")


def ensure_announcement_fields(title: str | None, content: str | None) -> tuple[str, str]:
	return (
		_require_length(title, ANNOUNCEMENT_TITLE_MIN, "announcement_title_too_short"),
		_require_length(content, ANNOUNCEMENT_CONTENT_MIN, "announcement_content_too_short"),
	)


def ensure_profile_names(first_name: str | None, last_name: str | None) -> tuple[str, str]:
	return (
		_require_length(first_name, 1, "first_name_required"),
		_require_length(last_name, 1, "last_name_required"),
	)
