"""Event registration, cancellation and entry-pass check-in."""

from __future__ import annotations

import logging
from uuid import UUID

from clubhub.clubs.domain import audit, entry_pass, lookups, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import (
	ClubsError,
	ConflictError,
	InvalidStateError,
	NotFoundError,
	ValidationError,
)
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.infra.postgres import get_pool
from clubhub.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class RegistrationService:
	"""Keeps registrations and the per-event counter in step."""

	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	async def register(self, user: AuthenticatedUser, event_id: UUID) -> dto.RegistrationResponse:
		await lookups.require_profile(self.repo, user.id)
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				event = await lookups.require_event(self.repo, event_id, conn=conn, for_update=True)
				policies.ensure_event_open(event)
				registration = await self.repo.insert_registration(
					user_id=user.id,
					event_id=event.id,
					qr_code=entry_pass.issue(user.id, event.id),
					conn=conn,
				)
				if registration is None:
					raise ConflictError("already_registered")
				counter = await self.repo.adjust_event_counter(event.id, conn=conn, registered_delta=1)
		await audit.log_event("registration.created", user_id=user.id, meta={"event_id": event.id})
		obs_metrics.inc_registration("created")
		logger.info(
			"registration_created",
			extra={"event_id": str(event.id), "registered": counter.registered},
		)
		return dto.RegistrationResponse.from_model(registration)

	async def cancel(self, user: AuthenticatedUser, event_id: UUID) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				event = await lookups.require_event(self.repo, event_id, conn=conn, for_update=True)
				if event.is_past():
					raise InvalidStateError("event_already_started")
				removed = await self.repo.delete_registration(user.id, event.id, conn=conn)
				if removed is None:
					raise NotFoundError("registration_not_found")
				await self.repo.adjust_event_counter(
					event.id,
					conn=conn,
					registered_delta=-1,
					checked_in_delta=-1 if removed.checked_in_at else 0,
				)
		await audit.log_event("registration.cancelled", user_id=user.id, meta={"event_id": event_id})
		obs_metrics.inc_registration("cancelled")

	async def check_in(
		self,
		user: AuthenticatedUser,
		event_id: UUID,
		payload: dto.CheckInRequest,
	) -> dto.RegistrationResponse:
		"""Verify an entry pass at the door and mark its registration as attended."""
		try:
			event = await lookups.require_event(self.repo, event_id)
			club = await lookups.require_club(self.repo, event.club_id)
			policies.assert_club_admin(club, user.id)
			token = payload.token.strip()
			decoded = entry_pass.verify(token)
			if decoded.event_id != event.id:
				raise ValidationError("entry_pass_wrong_event")
			pool = await get_pool()
			async with pool.acquire() as conn:
				async with conn.transaction():
					registration = await self.repo.get_registration(decoded.user_id, event.id, conn=conn)
					if registration is None or registration.qr_code != token:
						raise NotFoundError("registration_not_found")
					updated = await self.repo.mark_checked_in(decoded.user_id, event.id, conn=conn)
					if updated is None:
						raise ConflictError("already_checked_in")
					await self.repo.adjust_event_counter(event.id, conn=conn, checked_in_delta=1)
		except ClubsError as exc:
			obs_metrics.inc_check_in(exc.detail)
			raise
		await audit.log_event(
			"registration.checked_in",
			user_id=user.id,
			meta={"event_id": event.id, "attendee_id": decoded.user_id},
		)
		obs_metrics.inc_check_in("ok")
		return dto.RegistrationResponse.from_model(updated)

	async def list_my_registrations(self, user: AuthenticatedUser) -> dto.MyRegistrationListResponse:
		rows = await self.repo.list_user_registrations(user.id)
		items = [
			dto.MyRegistrationResponse(
				registration=dto.RegistrationResponse.from_model(registration),
				event=dto.EventResponse.from_model(event),
			)
			for registration, event in rows
		]
		return dto.MyRegistrationListResponse(items=items)
