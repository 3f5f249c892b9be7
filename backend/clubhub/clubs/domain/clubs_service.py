"""Club lifecycle: proposal, approval workflow, queries and deletion."""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from clubhub.clubs.domain import audit, lookups, placeholders, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import InvalidStateError, NotFoundError
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.infra.postgres import get_pool
from clubhub.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class ClubsService:
	"""Business logic for the club approval workflow."""

	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	async def propose_club(self, user: AuthenticatedUser, payload: dto.ClubCreateRequest) -> dto.ClubResponse:
		"""Create a pending club owned by the caller and record it in the caller's admin_of."""
		name, description = policies.ensure_club_fields(payload.name, payload.description)
		await lookups.require_profile(self.repo, user.id)
		club_id = uuid4()
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				club = await self.repo.create_club(
					club_id=club_id,
					name=name,
					description=description,
					admin_id=user.id,
					logo_url=placeholders.club_logo_url(club_id),
					conn=conn,
				)
				await self.repo.add_admin_of(user.id, club.id, conn=conn)
		await audit.log_event("club.proposed", user_id=user.id, meta={"club_id": club.id})
		obs_metrics.inc_club_proposed()
		logger.info("club_proposed", extra={"club_id": str(club.id)})
		return dto.ClubResponse.from_model(club, member_count=0)

	async def decide_club(
		self,
		user: AuthenticatedUser,
		club_id: UUID,
		payload: dto.ClubDecisionRequest,
	) -> dto.ClubResponse:
		"""Approve or reject a pending club; approval also enrols the club admin."""
		actor = await self.repo.get_user(user.id)
		policies.assert_global_admin(actor)
		decision = policies.ensure_decision(payload.decision)
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				await lookups.require_club(self.repo, club_id, conn=conn, for_update=True)
				club = await self.repo.decide_club(club_id, status=decision, decided_by=user.id, conn=conn)
				if club is None:
					raise InvalidStateError("club_already_decided")
				if decision == "approved":
					await self.repo.insert_membership(club.admin_id, club.id, conn=conn)
				member_count = await self.repo.count_members(club.id, conn=conn)
		await audit.log_event(
			"club.decided",
			user_id=user.id,
			meta={"club_id": club.id, "decision": decision},
		)
		obs_metrics.inc_club_decision(decision)
		logger.info("club_decided", extra={"club_id": str(club.id), "decision": decision})
		return dto.ClubResponse.from_model(club, member_count=member_count)

	async def get_club(self, club_id: UUID) -> dto.ClubResponse:
		club = await lookups.require_club(self.repo, club_id)
		member_count = await self.repo.count_members(club.id)
		return dto.ClubResponse.from_model(club, member_count=member_count)

	async def list_clubs(self) -> dto.ClubListResponse:
		rows = await self.repo.list_clubs_by_status("approved")
		return dto.ClubListResponse(
			items=[dto.ClubResponse.from_model(club, member_count=count) for club, count in rows]
		)

	async def list_pending_clubs(self, user: AuthenticatedUser) -> dto.ClubListResponse:
		actor = await self.repo.get_user(user.id)
		policies.assert_global_admin(actor)
		rows = await self.repo.list_clubs_by_status("pending")
		return dto.ClubListResponse(
			items=[dto.ClubResponse.from_model(club, member_count=count) for club, count in rows]
		)

	async def delete_club(self, user: AuthenticatedUser, club_id: UUID) -> None:
		"""Delete a club with its memberships, events, registrations and announcements."""
		actor = await self.repo.get_user(user.id)
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				club = await lookups.require_club(self.repo, club_id, conn=conn, for_update=True)
				policies.assert_club_admin_or_global(club, actor, user.id)
				await self.repo.remove_admin_of(club.admin_id, club.id, conn=conn)
				deleted = await self.repo.delete_club(club.id, conn=conn)
				if not deleted:
					raise NotFoundError("club_not_found")
		await audit.log_event("club.deleted", user_id=user.id, meta={"club_id": club_id})
		obs_metrics.inc_club_deleted()
		logger.info("club_deleted", extra={"club_id": str(club_id)})
