from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from clubhub.clubs.domain.events_service import EventsService
from clubhub.clubs.domain.exceptions import (
	AuthorizationError,
	InvalidStateError,
	NotFoundError,
	ValidationError,
)
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser


def _user(profile) -> AuthenticatedUser:
	return AuthenticatedUser(id=profile.id, email=profile.email)


def _payload(**overrides) -> dto.EventCreateRequest:
	data = {
		"name": "Spring Hackathon",
		"description": "Twenty four hours of building things",
		"location": "Main Hall",
		"date_time": datetime.now(timezone.utc) + timedelta(days=7),
	}
	data.update(overrides)
	return dto.EventCreateRequest(**data)


@pytest.mark.asyncio
async def test_create_event_starts_with_zero_counter(repo, fake_pool):
	alice = repo.seed_user("alice", "alice@college.edu")
	club = repo.seed_club(alice.id)
	service = EventsService(repository=repo)

	event = await service.create_event(_user(alice), club.id, _payload())

	assert event.club_id == club.id
	assert event.attendee_count == 0
	assert event.checked_in_count == 0
	assert event.is_past is False
	assert event.banner_url
	assert repo.counters[event.id].registered == 0


@pytest.mark.asyncio
async def test_create_event_rejects_non_admin_and_pending_club(repo, fake_pool):
	alice = repo.seed_user("alice", "alice@college.edu")
	bob = repo.seed_user("bob", "bob@college.edu")
	club = repo.seed_club(alice.id)
	pending = repo.seed_club(alice.id, status="pending", name="Pending Club")
	service = EventsService(repository=repo)

	with pytest.raises(AuthorizationError):
		await service.create_event(_user(bob), club.id, _payload())
	with pytest.raises(InvalidStateError):
		await service.create_event(_user(alice), pending.id, _payload())
	assert repo.events == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
	("overrides", "detail"),
	[
		({"name": "Hi"}, "event_name_too_short"),
		({"description": "Short"}, "event_description_too_short"),
		({"location": "  "}, "event_location_too_short"),
		({"date_time": datetime.now(timezone.utc) - timedelta(hours=1)}, "event_datetime_in_past"),
		({"date_time": datetime(2099, 1, 1, 18, 0)}, "event_datetime_timezone_required"),
	],
)
async def test_create_event_validates_fields(repo, fake_pool, overrides, detail):
	alice = repo.seed_user("alice", "alice@college.edu")
	club = repo.seed_club(alice.id)
	service = EventsService(repository=repo)

	with pytest.raises(ValidationError) as excinfo:
		await service.create_event(_user(alice), club.id, _payload(**overrides))

	assert excinfo.value.detail == detail


@pytest.mark.asyncio
async def test_list_events_by_scope(repo, fake_pool):
	club = repo.seed_club("alice")
	now = datetime.now(timezone.utc)
	soon = repo.seed_event(club.id, date_time=now + timedelta(days=1), name="Soon")
	later = repo.seed_event(club.id, date_time=now + timedelta(days=10), name="Later")
	yesterday = repo.seed_event(club.id, date_time=now - timedelta(days=1), name="Yesterday")
	last_month = repo.seed_event(club.id, date_time=now - timedelta(days=30), name="Last month")
	service = EventsService(repository=repo)

	upcoming = await service.list_club_events(club.id)
	past = await service.list_club_events(club.id, scope="past")
	everything = await service.list_club_events(club.id, scope="all")

	assert [e.id for e in upcoming.items] == [soon.id, later.id]
	assert [e.id for e in past.items] == [yesterday.id, last_month.id]
	assert all(e.is_past for e in past.items)
	assert len(everything.items) == 4

	with pytest.raises(ValidationError):
		await service.list_club_events(club.id, scope="someday")


@pytest.mark.asyncio
async def test_update_event_revalidates_changed_fields(repo, fake_pool):
	alice = repo.seed_user("alice", "alice@college.edu")
	bob = repo.seed_user("bob", "bob@college.edu")
	club = repo.seed_club(alice.id)
	event = repo.seed_event(club.id, created_by=alice.id)
	service = EventsService(repository=repo)

	updated = await service.update_event(_user(alice), event.id, dto.EventUpdateRequest(location="Gym B"))
	assert updated.location == "Gym B"
	assert updated.name == event.name

	with pytest.raises(ValidationError):
		await service.update_event(_user(alice), event.id, dto.EventUpdateRequest(name="X"))
	with pytest.raises(AuthorizationError):
		await service.update_event(_user(bob), event.id, dto.EventUpdateRequest(location="Library"))


@pytest.mark.asyncio
async def test_delete_event_removes_registrations(repo, fake_pool):
	alice = repo.seed_user("alice", "alice@college.edu")
	club = repo.seed_club(alice.id)
	event = repo.seed_event(club.id, created_by=alice.id)
	await repo.insert_registration(user_id="bob", event_id=event.id, qr_code="pass", conn=None)
	service = EventsService(repository=repo)

	await service.delete_event(_user(alice), event.id)

	assert repo.events == {}
	assert repo.registrations == {}
	with pytest.raises(NotFoundError):
		await service.get_event(event.id)
