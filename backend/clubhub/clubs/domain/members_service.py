"""Membership management for clubs."""

from __future__ import annotations

import logging
from uuid import UUID

from clubhub.clubs.domain import audit, lookups, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import ConflictError, NotFoundError
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class MembersService:
	"""Join/leave lifecycle and admin-driven roster changes."""

	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	async def join_club(self, user: AuthenticatedUser, club_id: UUID) -> dto.MembershipResponse:
		club = await lookups.require_club(self.repo, club_id)
		policies.ensure_club_approved(club)
		await lookups.require_profile(self.repo, user.id)
		# The unique (user_id, club_id) constraint decides concurrent joins.
		membership = await self.repo.insert_membership(user.id, club.id)
		if membership is None:
			raise ConflictError("already_member")
		await audit.log_event("membership.joined", user_id=user.id, meta={"club_id": club.id})
		obs_metrics.inc_membership_change("joined")
		logger.info("membership_joined", extra={"club_id": str(club.id)})
		return dto.MembershipResponse.from_model(membership)

	async def leave_club(self, user: AuthenticatedUser, club_id: UUID) -> None:
		removed = await self.repo.delete_membership(user.id, club_id)
		if removed is None:
			raise NotFoundError("membership_not_found")
		await audit.log_event("membership.left", user_id=user.id, meta={"club_id": club_id})
		obs_metrics.inc_membership_change("left")

	async def add_member(
		self,
		user: AuthenticatedUser,
		club_id: UUID,
		payload: dto.MemberAddRequest,
	) -> dto.MembershipResponse:
		club = await lookups.require_club(self.repo, club_id)
		policies.assert_club_admin(club, user.id)
		policies.ensure_club_approved(club)
		target = await self.repo.get_user_by_email(payload.email)
		if target is None:
			raise NotFoundError("user_not_found")
		membership = await self.repo.insert_membership(target.id, club.id)
		if membership is None:
			raise ConflictError("already_member")
		await audit.log_event(
			"membership.added",
			user_id=user.id,
			meta={"club_id": club.id, "member_id": target.id},
		)
		obs_metrics.inc_membership_change("added")
		return dto.MembershipResponse.from_model(membership)

	async def remove_member(self, user: AuthenticatedUser, membership_id: UUID) -> None:
		membership = await self.repo.get_membership_by_id(membership_id)
		if membership is None:
			raise NotFoundError("membership_not_found")
		club = await lookups.require_club(self.repo, membership.club_id)
		if not policies.is_club_admin(club, user.id):
			actor = await self.repo.get_user(user.id)
			policies.assert_club_admin_or_global(club, actor, user.id)
		removed = await self.repo.delete_membership_by_id(membership_id)
		if removed is None:
			raise NotFoundError("membership_not_found")
		await audit.log_event(
			"membership.removed",
			user_id=user.id,
			meta={"club_id": club.id, "member_id": removed.user_id},
		)
		obs_metrics.inc_membership_change("removed")

	async def list_members(self, club_id: UUID) -> dto.MemberListResponse:
		"""Membership lookup by club followed by a batch user lookup."""
		club = await lookups.require_club(self.repo, club_id)
		memberships = await self.repo.list_club_memberships(club.id)
		profiles = {
			profile.id: profile
			for profile in await self.repo.list_users_by_ids(m.user_id for m in memberships)
		}
		items: list[dto.MemberResponse] = []
		for membership in memberships:
			profile = profiles.get(membership.user_id)
			if profile is None:
				continue
			items.append(
				dto.MemberResponse(
					membership_id=membership.id,
					user_id=profile.id,
					email=profile.email,
					first_name=profile.first_name,
					last_name=profile.last_name,
					department=profile.department,
					year=profile.year,
					join_date=membership.join_date,
					is_club_admin=profile.id == club.admin_id,
				)
			)
		return dto.MemberListResponse(items=items)
