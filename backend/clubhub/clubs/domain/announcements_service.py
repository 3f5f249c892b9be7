"""Club announcements, visible to members only."""

from __future__ import annotations

from uuid import UUID

from clubhub.clubs.domain import audit, lookups, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import AuthorizationError, NotFoundError
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.obs import metrics as obs_metrics


class AnnouncementsService:
	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	async def create_announcement(
		self,
		user: AuthenticatedUser,
		club_id: UUID,
		payload: dto.AnnouncementCreateRequest,
	) -> dto.AnnouncementResponse:
		club = await lookups.require_club(self.repo, club_id)
		policies.assert_club_admin(club, user.id)
		title, content = policies.ensure_announcement_fields(payload.title, payload.content)
		announcement = await self.repo.create_announcement(
			club_id=club.id,
			title=title,
			content=content,
			created_by=user.id,
		)
		await audit.log_event(
			"announcement.created",
			user_id=user.id,
			meta={"club_id": club.id, "announcement_id": announcement.id},
		)
		obs_metrics.inc_announcement_created()
		return dto.AnnouncementResponse.from_model(announcement)

	async def list_announcements(self, user: AuthenticatedUser, club_id: UUID) -> dto.AnnouncementListResponse:
		club = await lookups.require_club(self.repo, club_id)
		if not policies.is_club_admin(club, user.id):
			membership = await self.repo.get_membership(user.id, club.id)
			if membership is None:
				actor = await self.repo.get_user(user.id)
				if not policies.is_global_admin(actor):
					raise AuthorizationError("membership_required")
		announcements = await self.repo.list_announcements(club.id)
		return dto.AnnouncementListResponse(
			items=[dto.AnnouncementResponse.from_model(item) for item in announcements]
		)

	async def delete_announcement(self, user: AuthenticatedUser, announcement_id: UUID) -> None:
		announcement = await self.repo.get_announcement(announcement_id)
		if announcement is None:
			raise NotFoundError("announcement_not_found")
		club = await lookups.require_club(self.repo, announcement.club_id)
		policies.assert_club_admin(club, user.id)
		if not await self.repo.delete_announcement(announcement.id):
			raise NotFoundError("announcement_not_found")
		await audit.log_event(
			"announcement.deleted",
			user_id=user.id,
			meta={"club_id": club.id, "announcement_id": announcement.id},
		)
