"""Profile bootstrap and lookups for authenticated users."""

from __future__ import annotations

import logging

from clubhub.clubs.domain import audit, lookups, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import ConflictError, NotFoundError, ValidationError
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser

logger = logging.getLogger(__name__)


class UsersService:
	"""Creates and edits user profiles; role and admin_of are never user-editable."""

	def __init__(self, repository: repo_module.ClubsRepository | None = None) -> None:
		self.repo = repository or repo_module.ClubsRepository()

	def _response(self, profile) -> dto.ProfileResponse:
		return dto.ProfileResponse.from_model(profile, is_global_admin=policies.is_global_admin(profile))

	async def bootstrap_profile(
		self,
		user: AuthenticatedUser,
		payload: dto.ProfileCreateRequest,
	) -> dto.ProfileResponse:
		if not user.email:
			raise ValidationError("email_required")
		first_name, last_name = policies.ensure_profile_names(payload.first_name, payload.last_name)
		if await self.repo.get_user(user.id) is not None:
			raise ConflictError("profile_exists")
		role = "admin" if policies.is_on_admin_allow_list(user.id, user.email) else "student"
		profile = await self.repo.create_user(
			user_id=user.id,
			email=user.email,
			first_name=first_name,
			last_name=last_name,
			role=role,
			department=(payload.department or "").strip() or None,
			year=payload.year,
		)
		if profile is None:
			raise ConflictError("email_taken")
		await audit.log_event("profile.created", user_id=user.id, meta={"role": role})
		logger.info("profile_created", extra={"role": role})
		return self._response(profile)

	async def get_profile(self, user: AuthenticatedUser) -> dto.ProfileResponse:
		profile = await lookups.require_profile(self.repo, user.id)
		return self._response(profile)

	async def update_profile(
		self,
		user: AuthenticatedUser,
		payload: dto.ProfileUpdateRequest,
	) -> dto.ProfileResponse:
		first_name = payload.first_name
		last_name = payload.last_name
		if first_name is not None or last_name is not None:
			current = await lookups.require_profile(self.repo, user.id)
			first_name, last_name = policies.ensure_profile_names(
				first_name if first_name is not None else current.first_name,
				last_name if last_name is not None else current.last_name,
			)
		# Fields sent explicitly as null (or a blank department) are cleared.
		changes = payload.model_dump(exclude_unset=True)
		department = (changes.get("department") or "").strip() or None
		profile = await self.repo.update_user(
			user.id,
			first_name=first_name,
			last_name=last_name,
			department=department,
			year=changes.get("year"),
			clear_department="department" in changes and department is None,
			clear_year="year" in changes and changes["year"] is None,
		)
		if profile is None:
			raise NotFoundError("profile_not_found")
		return self._response(profile)

	async def list_users(self, user: AuthenticatedUser) -> dto.UserListResponse:
		actor = await self.repo.get_user(user.id)
		policies.assert_global_admin(actor)
		profiles = await self.repo.list_users()
		return dto.UserListResponse(items=[self._response(profile) for profile in profiles])

	async def list_my_clubs(self, user: AuthenticatedUser) -> dto.ClubListResponse:
		rows = await self.repo.list_user_clubs(user.id)
		return dto.ClubListResponse(
			items=[
				dto.ClubResponse.from_model(club, member_count=members, upcoming_event_count=upcoming)
				for club, members, upcoming in rows
			]
		)
