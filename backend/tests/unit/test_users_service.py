from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from clubhub.clubs.domain.exceptions import (
	AuthorizationError,
	ConflictError,
	NotFoundError,
	ValidationError,
)
from clubhub.clubs.domain.users_service import UsersService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser


@pytest.mark.asyncio
async def test_bootstrap_creates_student_profile(repo):
	service = UsersService(repository=repo)

	profile = await service.bootstrap_profile(
		AuthenticatedUser(id="bob", email="bob@college.edu"),
		dto.ProfileCreateRequest(first_name=" Bob ", last_name="Builder", department="Engineering", year=2),
	)

	assert profile.role == "student"
	assert profile.first_name == "Bob"
	assert profile.is_global_admin is False
	assert profile.admin_of == []


@pytest.mark.asyncio
async def test_bootstrap_grants_admin_to_allow_listed_email(repo):
	service = UsersService(repository=repo)

	profile = await service.bootstrap_profile(
		AuthenticatedUser(id="dean", email="Dean@College.edu"),
		dto.ProfileCreateRequest(first_name="Dana", last_name="Dean"),
	)

	assert profile.role == "admin"
	assert profile.is_global_admin is True


@pytest.mark.asyncio
async def test_bootstrap_conflicts(repo):
	repo.seed_user("bob", "bob@college.edu")
	service = UsersService(repository=repo)
	payload = dto.ProfileCreateRequest(first_name="Bob", last_name="Builder")

	with pytest.raises(ConflictError) as excinfo:
		await service.bootstrap_profile(AuthenticatedUser(id="bob", email="bob@college.edu"), payload)
	assert excinfo.value.detail == "profile_exists"

	with pytest.raises(ConflictError) as excinfo:
		await service.bootstrap_profile(AuthenticatedUser(id="bob-2", email="bob@college.edu"), payload)
	assert excinfo.value.detail == "email_taken"

	with pytest.raises(ValidationError):
		await service.bootstrap_profile(AuthenticatedUser(id="anon", email=None), payload)


@pytest.mark.asyncio
async def test_update_profile_keeps_role(repo):
	repo.seed_user("bob", "bob@college.edu")
	service = UsersService(repository=repo)
	user = AuthenticatedUser(id="bob", email="bob@college.edu")

	updated = await service.update_profile(user, dto.ProfileUpdateRequest(department="Physics", year=3))

	assert updated.department == "Physics"
	assert updated.year == 3
	assert updated.role == "student"

	with pytest.raises(ValidationError):
		await service.update_profile(user, dto.ProfileUpdateRequest(first_name="   "))

	with pytest.raises(NotFoundError):
		await service.get_profile(AuthenticatedUser(id="ghost", email="ghost@college.edu"))


@pytest.mark.asyncio
async def test_list_users_is_global_admin_only(repo):
	repo.seed_user("bob", "bob@college.edu")
	repo.seed_user("dean", "dean@college.edu", role="admin")
	service = UsersService(repository=repo)

	with pytest.raises(AuthorizationError):
		await service.list_users(AuthenticatedUser(id="bob", email="bob@college.edu"))

	listing = await service.list_users(AuthenticatedUser(id="dean", email="dean@college.edu"))
	assert {item.id for item in listing.items} == {"bob", "dean"}


@pytest.mark.asyncio
async def test_list_my_clubs(repo):
	bob = repo.seed_user("bob", "bob@college.edu")
	joined = repo.seed_club("alice", name="Film Society")
	repo.seed_club("alice", name="Knitting Circle")
	await repo.insert_membership(bob.id, joined.id)
	service = UsersService(repository=repo)

	clubs = await service.list_my_clubs(AuthenticatedUser(id="bob", email="bob@college.edu"))

	assert [club.name for club in clubs.items] == ["Film Society"]


@pytest.mark.asyncio
async def test_list_my_clubs_reports_member_and_upcoming_event_counts(repo):
	bob = repo.seed_user("bob", "bob@college.edu")
	carol = repo.seed_user("carol", "carol@college.edu")
	club = repo.seed_club("alice", name="Film Society")
	await repo.insert_membership(bob.id, club.id)
	await repo.insert_membership(carol.id, club.id)
	now = datetime.now(timezone.utc)
	repo.seed_event(club.id, date_time=now + timedelta(days=2), name="Noir Night")
	repo.seed_event(club.id, date_time=now - timedelta(days=2), name="Silent Shorts")
	service = UsersService(repository=repo)

	clubs = await service.list_my_clubs(AuthenticatedUser(id="bob", email="bob@college.edu"))

	(item,) = clubs.items
	assert item.member_count == 2
	assert item.upcoming_event_count == 1


@pytest.mark.asyncio
async def test_update_profile_clears_only_explicitly_sent_fields(repo):
	repo.seed_user("bob", "bob@college.edu")
	service = UsersService(repository=repo)
	user = AuthenticatedUser(id="bob", email="bob@college.edu")
	await service.update_profile(user, dto.ProfileUpdateRequest(department="Physics", year=3))

	kept = await service.update_profile(user, dto.ProfileUpdateRequest(first_name="Robert"))
	assert kept.department == "Physics"
	assert kept.year == 3

	cleared = await service.update_profile(user, dto.ProfileUpdateRequest(department=None))
	assert cleared.department is None
	assert cleared.year == 3

	blanked = await service.update_profile(
		user, dto.ProfileUpdateRequest.model_validate({"department": "History", "year": None})
	)
	assert blanked.department == "History"
	assert blanked.year is None

	await service.update_profile(user, dto.ProfileUpdateRequest(department="   "))
	assert (await service.get_profile(user)).department is None
