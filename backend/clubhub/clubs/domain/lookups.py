"""Shared loaders that turn missing rows into domain errors."""

from __future__ import annotations

from uuid import UUID

import asyncpg

from clubhub.clubs.domain import models, repo as repo_module
from clubhub.clubs.domain.exceptions import NotFoundError


async def require_profile(
	repo: repo_module.ClubsRepository,
	user_id: str,
	*,
	conn: asyncpg.Connection | None = None,
) -> models.UserProfile:
	profile = await repo.get_user(user_id, conn=conn)
	if profile is None:
		raise NotFoundError("profile_not_found")
	return profile


async def require_club(
	repo: repo_module.ClubsRepository,
	club_id: UUID,
	*,
	conn: asyncpg.Connection | None = None,
	for_update: bool = False,
) -> models.Club:
	club = await repo.get_club(club_id, conn=conn, for_update=for_update)
	if club is None:
		raise NotFoundError("club_not_found")
	return club


async def require_event(
	repo: repo_module.ClubsRepository,
	event_id: UUID,
	*,
	conn: asyncpg.Connection | None = None,
	for_update: bool = False,
) -> models.ClubEvent:
	event = await repo.get_event(event_id, conn=conn, for_update=for_update)
	if event is None:
		raise NotFoundError("event_not_found")
	return event
