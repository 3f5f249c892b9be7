"""Event service layer for club events."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from clubhub.clubs.domain import audit, lookups, placeholders, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import NotFoundError
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.infra.postgres import get_pool
from clubhub.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class EventsService:
	"""Business logic for event CRUD and listing."""

	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	async def create_event(
		self,
		user: AuthenticatedUser,
		club_id: UUID,
		payload: dto.EventCreateRequest,
	) -> dto.EventResponse:
		club = await lookups.require_club(self.repo, club_id)
		policies.assert_club_admin(club, user.id)
		policies.ensure_club_approved(club)
		name = policies.ensure_event_name(payload.name)
		description = policies.ensure_event_description(payload.description)
		location = policies.ensure_event_location(payload.location)
		date_time = policies.ensure_future_datetime(payload.date_time)
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				event, counter = await self.repo.create_event(
					club_id=club.id,
					name=name,
					description=description,
					date_time=date_time,
					location=location,
					banner_url=placeholders.event_banner_url(),
					created_by=user.id,
					conn=conn,
				)
		await audit.log_event("event.created", user_id=user.id, meta={"club_id": club.id, "event_id": event.id})
		obs_metrics.inc_event_changed("created")
		logger.info("event_created", extra={"club_id": str(club.id), "event_id": str(event.id)})
		return dto.EventResponse.from_model(event, counter)

	async def list_club_events(
		self,
		club_id: UUID,
		*,
		scope: str | None = None,
	) -> dto.EventListResponse:
		club = await lookups.require_club(self.repo, club_id)
		effective_scope = policies.ensure_event_scope(scope)
		now = datetime.now(timezone.utc)
		rows = await self.repo.list_club_events(club.id, scope=effective_scope, now=now)
		return dto.EventListResponse(
			items=[dto.EventResponse.from_model(event, counter, now=now) for event, counter in rows]
		)

	async def get_event(self, event_id: UUID) -> dto.EventResponse:
		row = await self.repo.get_event_with_counter(event_id)
		if row is None:
			raise NotFoundError("event_not_found")
		event, counter = row
		return dto.EventResponse.from_model(event, counter)

	async def update_event(
		self,
		user: AuthenticatedUser,
		event_id: UUID,
		payload: dto.EventUpdateRequest,
	) -> dto.EventResponse:
		event = await lookups.require_event(self.repo, event_id)
		club = await lookups.require_club(self.repo, event.club_id)
		policies.assert_club_admin(club, user.id)
		changes = payload.model_dump(exclude_unset=True)
		name = policies.ensure_event_name(changes["name"]) if changes.get("name") is not None else None
		description = (
			policies.ensure_event_description(changes["description"])
			if changes.get("description") is not None
			else None
		)
		location = (
			policies.ensure_event_location(changes["location"]) if changes.get("location") is not None else None
		)
		date_time = (
			policies.ensure_future_datetime(changes["date_time"]) if changes.get("date_time") is not None else None
		)
		updated = await self.repo.update_event(
			event.id,
			name=name,
			description=description,
			location=location,
			date_time=date_time,
		)
		if updated is None:
			raise NotFoundError("event_not_found")
		counter = await self.repo.get_event_counter(updated.id)
		await audit.log_event(
			"event.updated",
			user_id=user.id,
			meta={"event_id": updated.id, "fields": ",".join(sorted(changes))},
		)
		obs_metrics.inc_event_changed("updated")
		return dto.EventResponse.from_model(updated, counter)

	async def delete_event(self, user: AuthenticatedUser, event_id: UUID) -> None:
		event = await lookups.require_event(self.repo, event_id)
		club = await lookups.require_club(self.repo, event.club_id)
		policies.assert_club_admin(club, user.id)
		if not await self.repo.delete_event(event.id):
			raise NotFoundError("event_not_found")
		await audit.log_event("event.deleted", user_id=user.id, meta={"club_id": club.id, "event_id": event.id})
		obs_metrics.inc_event_changed("deleted")
		logger.info("event_deleted", extra={"event_id": str(event.id)})
