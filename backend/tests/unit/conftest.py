from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable
from uuid import UUID, uuid4

import pytest
import pytest_asyncio

from clubhub.clubs.domain import models


class _FakeTransaction:
	async def __aenter__(self):
		return None

	async def __aexit__(self, exc_type, exc, tb):
		return False


class _FakeAcquire:
	def __init__(self, conn):
		self._conn = conn

	async def __aenter__(self):
		return self._conn

	async def __aexit__(self, exc_type, exc, tb):
		return False


class _FakeConnection:
	def transaction(self):
		return _FakeTransaction()


class _FakePool:
	def __init__(self, conn):
		self._conn = conn

	def acquire(self):
		return _FakeAcquire(self._conn)


def _now() -> datetime:
	return datetime.now(timezone.utc)


class FakeClubsRepository:
	"""In-memory stand-in for ClubsRepository honouring its uniqueness rules."""

	def __init__(self) -> None:
		self.users: dict[str, models.UserProfile] = {}
		self.clubs: dict[UUID, models.Club] = {}
		self.memberships: dict[UUID, models.ClubMembership] = {}
		self.events: dict[UUID, models.ClubEvent] = {}
		self.counters: dict[UUID, models.EventCounter] = {}
		self.registrations: dict[tuple[str, UUID], models.Registration] = {}
		self.announcements: dict[UUID, models.Announcement] = {}

	# --- seeding helpers --------------------------------------------------

	def seed_user(self, user_id: str, email: str, *, role: str = "student") -> models.UserProfile:
		now = _now()
		profile = models.UserProfile(
			id=user_id,
			email=email,
			first_name=user_id.title(),
			last_name="Tester",
			role=role,
			admin_of=[],
			created_at=now,
			updated_at=now,
		)
		self.users[user_id] = profile
		return profile

	def seed_club(self, admin_id: str, *, status: str = "approved", name: str = "Robotics Club") -> models.Club:
		now = _now()
		club = models.Club(
			id=uuid4(),
			name=name,
			description="Build and race small robots",
			admin_id=admin_id,
			logo_url=None,
			status=status,
			created_at=now,
			updated_at=now,
		)
		self.clubs[club.id] = club
		if admin_id in self.users:
			profile = self.users[admin_id]
			self.users[admin_id] = profile.model_copy(update={"admin_of": [*profile.admin_of, club.id]})
		return club

	def seed_event(
		self,
		club_id: UUID,
		*,
		date_time: datetime | None = None,
		name: str = "Spring Hackathon",
		created_by: str = "owner",
	) -> models.ClubEvent:
		now = _now()
		event = models.ClubEvent(
			id=uuid4(),
			club_id=club_id,
			name=name,
			description="Twenty four hours of building things",
			date_time=date_time or now + timedelta(days=3),
			location="Main Hall",
			banner_url=None,
			created_by=created_by,
			created_at=now,
			updated_at=now,
		)
		self.events[event.id] = event
		self.counters[event.id] = models.EventCounter(event_id=event.id)
		return event

	def members_of(self, club_id: UUID) -> list[models.ClubMembership]:
		return [m for m in self.memberships.values() if m.club_id == club_id]

	# --- users ------------------------------------------------------------

	async def get_user(self, user_id: str, *, conn=None):
		return self.users.get(user_id)

	async def get_user_by_email(self, email: str, *, conn=None):
		lowered = email.strip().lower()
		return next((u for u in self.users.values() if u.email.lower() == lowered), None)

	async def create_user(self, *, user_id, email, first_name, last_name, role, department, year, conn=None):
		if user_id in self.users or await self.get_user_by_email(email):
			return None
		now = _now()
		profile = models.UserProfile(
			id=user_id,
			email=email,
			first_name=first_name,
			last_name=last_name,
			role=role,
			admin_of=[],
			department=department,
			year=year,
			created_at=now,
			updated_at=now,
		)
		self.users[user_id] = profile
		return profile

	async def update_user(
		self,
		user_id,
		*,
		first_name=None,
		last_name=None,
		department=None,
		year=None,
		clear_department=False,
		clear_year=False,
	):
		profile = self.users.get(user_id)
		if profile is None:
			return None
		changes = {
			key: value
			for key, value in {
				"first_name": first_name,
				"last_name": last_name,
				"department": department,
				"year": year,
			}.items()
			if value is not None
		}
		if clear_department:
			changes["department"] = None
		if clear_year:
			changes["year"] = None
		updated = profile.model_copy(update={**changes, "updated_at": _now()})
		self.users[user_id] = updated
		return updated

	async def list_users(self):
		return sorted(self.users.values(), key=lambda u: (u.last_name, u.first_name))

	async def list_users_by_ids(self, user_ids: Iterable[str], *, conn=None):
		ids = set(user_ids)
		return [u for u in self.users.values() if u.id in ids]

	async def add_admin_of(self, user_id, club_id, *, conn):
		profile = self.users[user_id]
		if club_id not in profile.admin_of:
			self.users[user_id] = profile.model_copy(update={"admin_of": [*profile.admin_of, club_id]})

	async def remove_admin_of(self, user_id, club_id, *, conn):
		profile = self.users.get(user_id)
		if profile is not None:
			remaining = [cid for cid in profile.admin_of if cid != club_id]
			self.users[user_id] = profile.model_copy(update={"admin_of": remaining})

	# --- clubs ------------------------------------------------------------

	async def create_club(self, *, club_id, name, description, admin_id, logo_url, conn):
		now = _now()
		club = models.Club(
			id=club_id,
			name=name,
			description=description,
			admin_id=admin_id,
			logo_url=logo_url,
			status="pending",
			created_at=now,
			updated_at=now,
		)
		self.clubs[club.id] = club
		return club

	async def get_club(self, club_id, *, conn=None, for_update=False):
		return self.clubs.get(club_id)

	async def list_clubs_by_status(self, status):
		return [
			(club, len(self.members_of(club.id)))
			for club in self.clubs.values()
			if club.status == status
		]

	async def list_user_clubs(self, user_id, *, now=None):
		reference = now or _now()
		joined = {m.club_id for m in self.memberships.values() if m.user_id == user_id}
		return [
			(
				club,
				len(self.members_of(club.id)),
				sum(1 for e in self.events.values() if e.club_id == club.id and e.date_time > reference),
			)
			for club in sorted(self.clubs.values(), key=lambda c: c.name)
			if club.id in joined
		]

	async def decide_club(self, club_id, *, status, decided_by, conn):
		club = self.clubs.get(club_id)
		if club is None or club.status != "pending":
			return None
		updated = club.model_copy(update={"status": status, "decided_by": decided_by, "decided_at": _now()})
		self.clubs[club_id] = updated
		return updated

	async def delete_club(self, club_id, *, conn):
		if self.clubs.pop(club_id, None) is None:
			return False
		self.memberships = {k: m for k, m in self.memberships.items() if m.club_id != club_id}
		event_ids = {e.id for e in self.events.values() if e.club_id == club_id}
		self.events = {k: e for k, e in self.events.items() if k not in event_ids}
		self.counters = {k: c for k, c in self.counters.items() if k not in event_ids}
		self.registrations = {k: r for k, r in self.registrations.items() if r.event_id not in event_ids}
		self.announcements = {k: a for k, a in self.announcements.items() if a.club_id != club_id}
		return True

	async def count_members(self, club_id, *, conn=None):
		return len(self.members_of(club_id))

	# --- memberships ------------------------------------------------------

	async def insert_membership(self, user_id, club_id, *, conn=None):
		if any(m.user_id == user_id and m.club_id == club_id for m in self.memberships.values()):
			return None
		membership = models.ClubMembership(id=uuid4(), user_id=user_id, club_id=club_id, join_date=_now())
		self.memberships[membership.id] = membership
		return membership

	async def get_membership(self, user_id, club_id, *, conn=None):
		return next(
			(m for m in self.memberships.values() if m.user_id == user_id and m.club_id == club_id),
			None,
		)

	async def get_membership_by_id(self, membership_id):
		return self.memberships.get(membership_id)

	async def delete_membership(self, user_id, club_id):
		existing = await self.get_membership(user_id, club_id)
		if existing is None:
			return None
		return self.memberships.pop(existing.id)

	async def delete_membership_by_id(self, membership_id):
		return self.memberships.pop(membership_id, None)

	async def list_club_memberships(self, club_id):
		return sorted(self.members_of(club_id), key=lambda m: m.join_date)

	# --- events -----------------------------------------------------------

	async def create_event(self, *, club_id, name, description, date_time, location, banner_url, created_by, conn):
		now = _now()
		event = models.ClubEvent(
			id=uuid4(),
			club_id=club_id,
			name=name,
			description=description,
			date_time=date_time,
			location=location,
			banner_url=banner_url,
			created_by=created_by,
			created_at=now,
			updated_at=now,
		)
		self.events[event.id] = event
		counter = models.EventCounter(event_id=event.id)
		self.counters[event.id] = counter
		return event, counter

	async def get_event(self, event_id, *, conn=None, for_update=False):
		return self.events.get(event_id)

	async def update_event(self, event_id, *, name=None, description=None, location=None, date_time=None):
		event = self.events.get(event_id)
		if event is None:
			return None
		changes = {
			key: value
			for key, value in {
				"name": name,
				"description": description,
				"location": location,
				"date_time": date_time,
			}.items()
			if value is not None
		}
		updated = event.model_copy(update={**changes, "updated_at": _now()})
		self.events[event_id] = updated
		return updated

	async def delete_event(self, event_id):
		if self.events.pop(event_id, None) is None:
			return False
		self.counters.pop(event_id, None)
		self.registrations = {k: r for k, r in self.registrations.items() if r.event_id != event_id}
		return True

	async def get_event_with_counter(self, event_id):
		event = self.events.get(event_id)
		if event is None:
			return None
		return event, self.counters.get(event_id, models.EventCounter(event_id=event_id))

	async def list_club_events(self, club_id, *, scope, now=None):
		reference = now or _now()
		events = [e for e in self.events.values() if e.club_id == club_id]
		if scope == "upcoming":
			events = sorted((e for e in events if e.date_time > reference), key=lambda e: e.date_time)
		elif scope == "past":
			events = sorted((e for e in events if e.date_time <= reference), key=lambda e: e.date_time, reverse=True)
		else:
			events = sorted(events, key=lambda e: e.date_time)
		return [(e, self.counters.get(e.id, models.EventCounter(event_id=e.id))) for e in events]

	async def get_event_counter(self, event_id, *, conn=None):
		return self.counters.get(event_id, models.EventCounter(event_id=event_id))

	async def adjust_event_counter(self, event_id, *, conn, registered_delta=0, checked_in_delta=0):
		current = self.counters.get(event_id, models.EventCounter(event_id=event_id))
		updated = models.EventCounter(
			event_id=event_id,
			registered=max(0, current.registered + registered_delta),
			checked_in=max(0, current.checked_in + checked_in_delta),
			updated_at=_now(),
		)
		self.counters[event_id] = updated
		return updated

	async def set_event_report(self, event_id, report):
		event = self.events.get(event_id)
		if event is None:
			return None
		updated = event.model_copy(update={"report": report, "report_generated_at": _now()})
		self.events[event_id] = updated
		return updated

	# --- registrations ----------------------------------------------------

	async def insert_registration(self, *, user_id, event_id, qr_code, conn):
		key = (user_id, event_id)
		if key in self.registrations:
			return None
		registration = models.Registration(
			id=uuid4(),
			user_id=user_id,
			event_id=event_id,
			registration_date=_now(),
			qr_code=qr_code,
		)
		self.registrations[key] = registration
		return registration

	async def get_registration(self, user_id, event_id, *, conn=None):
		return self.registrations.get((user_id, event_id))

	async def delete_registration(self, user_id, event_id, *, conn):
		return self.registrations.pop((user_id, event_id), None)

	async def mark_checked_in(self, user_id, event_id, *, conn):
		registration = self.registrations.get((user_id, event_id))
		if registration is None or registration.checked_in_at is not None:
			return None
		updated = registration.model_copy(update={"checked_in_at": _now()})
		self.registrations[(user_id, event_id)] = updated
		return updated

	async def list_user_registrations(self, user_id):
		return [
			(registration, self.events[registration.event_id])
			for (owner, _), registration in self.registrations.items()
			if owner == user_id and registration.event_id in self.events
		]

	# --- announcements ----------------------------------------------------

	async def create_announcement(self, *, club_id, title, content, created_by):
		announcement = models.Announcement(
			id=uuid4(),
			club_id=club_id,
			title=title,
			content=content,
			created_by=created_by,
			created_at=_now(),
		)
		self.announcements[announcement.id] = announcement
		return announcement

	async def get_announcement(self, announcement_id):
		return self.announcements.get(announcement_id)

	async def list_announcements(self, club_id):
		items = [a for a in self.announcements.values() if a.club_id == club_id]
		return sorted(items, key=lambda a: a.created_at, reverse=True)

	async def delete_announcement(self, announcement_id):
		return self.announcements.pop(announcement_id, None) is not None


@pytest.fixture
def repo() -> FakeClubsRepository:
	return FakeClubsRepository()


@pytest_asyncio.fixture
async def fake_pool(monkeypatch):
	connection = _FakeConnection()
	pool = _FakePool(connection)

	async def _get_pool():
		return pool

	for module in (
		"clubhub.clubs.domain.clubs_service",
		"clubhub.clubs.domain.events_service",
		"clubhub.clubs.domain.registration_service",
	):
		monkeypatch.setattr(f"{module}.get_pool", _get_pool)
	return pool
