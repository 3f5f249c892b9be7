"""Generated placeholder image URLs for clubs and events."""

from __future__ import annotations

from uuid import UUID, uuid4

from clubhub.settings import settings


def club_logo_url(club_id: UUID) -> str:
	return f"{settings.placeholder_image_base.rstrip('/')}/{club_id}/600/400"


def event_banner_url(seed: str | None = None) -> str:
	return f"{settings.placeholder_image_base.rstrip('/')}/{seed or uuid4().hex}/800/450"
