"""Async repository helpers for the clubs domain."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar
from uuid import UUID

import asyncpg

from clubhub.clubs.domain import models
from clubhub.infra.postgres import get_pool

T = TypeVar("T")

_EVENT_WITH_COUNTER = """
	SELECT e.*,
		COALESCE(c.registered, 0) AS registered,
		COALESCE(c.checked_in, 0) AS checked_in
	FROM club_event e
	LEFT JOIN event_counter c ON c.event_id = e.id
"""


def _event_with_counter(record: asyncpg.Record) -> tuple[models.ClubEvent, models.EventCounter]:
	data = dict(record)
	event = models.ClubEvent.model_validate(data)
	counter = models.EventCounter(
		event_id=event.id,
		registered=data.get("registered") or 0,
		checked_in=data.get("checked_in") or 0,
	)
	return event, counter


class ClubsRepository:
	"""Thin data-access layer around asyncpg."""

	async def _run(
		self,
		conn: asyncpg.Connection | None,
		fn: Callable[[asyncpg.Connection], Awaitable[T]],
	) -> T:
		if conn is not None:
			return await fn(conn)
		pool = await get_pool()
		async with pool.acquire() as acquired:
			return await fn(acquired)

	# --- Users ------------------------------------------------------------

	async def get_user(
		self,
		user_id: str,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.UserProfile | None:
		async def _fetch(connection: asyncpg.Connection) -> models.UserProfile | None:
			record = await connection.fetchrow("SELECT * FROM users WHERE id=$1", user_id)
			return models.UserProfile.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def get_user_by_email(
		self,
		email: str,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.UserProfile | None:
		async def _fetch(connection: asyncpg.Connection) -> models.UserProfile | None:
			record = await connection.fetchrow(
				"SELECT * FROM users WHERE lower(email)=lower($1)",
				email.strip(),
			)
			return models.UserProfile.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def create_user(
		self,
		*,
		user_id: str,
		email: str,
		first_name: str,
		last_name: str,
		role: str,
		department: str | None,
		year: int | None,
		conn: asyncpg.Connection | None = None,
	) -> models.UserProfile | None:
		"""Insert a profile; returns None when the id or email is already taken."""

		async def _insert(connection: asyncpg.Connection) -> models.UserProfile | None:
			record = await connection.fetchrow(
				"""
				INSERT INTO users (id, email, first_name, last_name, role, department, year)
				VALUES ($1, $2, $3, $4, $5, $6, $7)
				ON CONFLICT DO NOTHING
				RETURNING *
				""",
				user_id,
				email,
				first_name,
				last_name,
				role,
				department,
				year,
			)
			return models.UserProfile.model_validate(dict(record)) if record else None

		return await self._run(conn, _insert)

	async def update_user(
		self,
		user_id: str,
		*,
		first_name: str | None = None,
		last_name: str | None = None,
		department: str | None = None,
		year: int | None = None,
		clear_department: bool = False,
		clear_year: bool = False,
	) -> models.UserProfile | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"""
				UPDATE users
				SET first_name = COALESCE($2, first_name),
					last_name = COALESCE($3, last_name),
					department = CASE WHEN $6 THEN NULL ELSE COALESCE($4, department) END,
					year = CASE WHEN $7 THEN NULL ELSE COALESCE($5, year) END,
					updated_at = NOW()
				WHERE id = $1
				RETURNING *
				""",
				user_id,
				first_name,
				last_name,
				department,
				year,
				clear_department,
				clear_year,
			)
		return models.UserProfile.model_validate(dict(record)) if record else None

	async def list_users(self) -> list[models.UserProfile]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch("SELECT * FROM users ORDER BY last_name, first_name")
		return [models.UserProfile.model_validate(dict(row)) for row in rows]

	async def list_users_by_ids(
		self,
		user_ids: Iterable[str],
		*,
		conn: asyncpg.Connection | None = None,
	) -> list[models.UserProfile]:
		ids = list(dict.fromkeys(user_ids))
		if not ids:
			return []

		async def _fetch(connection: asyncpg.Connection) -> list[models.UserProfile]:
			rows = await connection.fetch(
				"SELECT * FROM users WHERE id = ANY($1::text[]) ORDER BY last_name, first_name",
				ids,
			)
			return [models.UserProfile.model_validate(dict(row)) for row in rows]

		return await self._run(conn, _fetch)

	async def add_admin_of(self, user_id: str, club_id: UUID, *, conn: asyncpg.Connection) -> None:
		await conn.execute(
			"""
			UPDATE users
			SET admin_of = array_append(admin_of, $2::uuid), updated_at = NOW()
			WHERE id = $1 AND NOT ($2::uuid = ANY(admin_of))
			""",
			user_id,
			str(club_id),
		)

	async def remove_admin_of(self, user_id: str, club_id: UUID, *, conn: asyncpg.Connection) -> None:
		await conn.execute(
			"""
			UPDATE users
			SET admin_of = array_remove(admin_of, $2::uuid), updated_at = NOW()
			WHERE id = $1
			""",
			user_id,
			str(club_id),
		)

	# --- Clubs ------------------------------------------------------------

	async def create_club(
		self,
		*,
		club_id: UUID,
		name: str,
		description: str,
		admin_id: str,
		logo_url: str | None,
		conn: asyncpg.Connection,
	) -> models.Club:
		record = await conn.fetchrow(
			"""
			INSERT INTO clubs (id, name, description, admin_id, logo_url, status)
			VALUES ($1, $2, $3, $4, $5, 'pending')
			RETURNING *
			""",
			str(club_id),
			name,
			description,
			admin_id,
			logo_url,
		)
		return models.Club.model_validate(dict(record))

	async def get_club(
		self,
		club_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
		for_update: bool = False,
	) -> models.Club | None:
		query = "SELECT * FROM clubs WHERE id=$1"
		if for_update:
			query += " FOR UPDATE"

		async def _fetch(connection: asyncpg.Connection) -> models.Club | None:
			record = await connection.fetchrow(query, str(club_id))
			return models.Club.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def list_clubs_by_status(self, status: str) -> list[tuple[models.Club, int]]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT c.*, COALESCE(m.member_count, 0) AS member_count
				FROM clubs c
				LEFT JOIN (
					SELECT club_id, COUNT(*) AS member_count
					FROM club_membership
					GROUP BY club_id
				) m ON m.club_id = c.id
				WHERE c.status = $1
				ORDER BY c.created_at DESC
				""",
				status,
			)
		return [(models.Club.model_validate(dict(row)), int(row["member_count"])) for row in rows]

	async def list_user_clubs(
		self,
		user_id: str,
		*,
		now: Optional[datetime] = None,
	) -> list[tuple[models.Club, int, int]]:
		"""Clubs the user belongs to with member and upcoming-event counts."""
		reference = now or datetime.now(timezone.utc)
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT c.*,
					COALESCE(m.member_count, 0) AS member_count,
					COALESCE(e.upcoming_count, 0) AS upcoming_event_count
				FROM club_membership mine
				JOIN clubs c ON c.id = mine.club_id
				LEFT JOIN (
					SELECT club_id, COUNT(*) AS member_count
					FROM club_membership
					GROUP BY club_id
				) m ON m.club_id = c.id
				LEFT JOIN (
					SELECT club_id, COUNT(*) AS upcoming_count
					FROM club_event
					WHERE date_time > $2
					GROUP BY club_id
				) e ON e.club_id = c.id
				WHERE mine.user_id = $1
				ORDER BY c.name
				""",
				user_id,
				reference,
			)
		return [
			(models.Club.model_validate(dict(row)), int(row["member_count"]), int(row["upcoming_event_count"]))
			for row in rows
		]

	async def decide_club(
		self,
		club_id: UUID,
		*,
		status: str,
		decided_by: str,
		conn: asyncpg.Connection,
	) -> models.Club | None:
		"""Move a pending club to a terminal status; returns None if it was not pending."""
		record = await conn.fetchrow(
			"""
			UPDATE clubs
			SET status = $2, decided_by = $3, decided_at = NOW(), updated_at = NOW()
			WHERE id = $1 AND status = 'pending'
			RETURNING *
			""",
			str(club_id),
			status,
			decided_by,
		)
		return models.Club.model_validate(dict(record)) if record else None

	async def delete_club(self, club_id: UUID, *, conn: asyncpg.Connection) -> bool:
		result = await conn.execute("DELETE FROM clubs WHERE id=$1", str(club_id))
		return result.endswith(" 1")

	async def count_members(self, club_id: UUID, *, conn: asyncpg.Connection | None = None) -> int:
		async def _fetch(connection: asyncpg.Connection) -> int:
			value = await connection.fetchval(
				"SELECT COUNT(*) FROM club_membership WHERE club_id=$1",
				str(club_id),
			)
			return int(value or 0)

		return await self._run(conn, _fetch)

	# --- Memberships ------------------------------------------------------

	async def insert_membership(
		self,
		user_id: str,
		club_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.ClubMembership | None:
		"""Insert a membership; returns None when the (user, club) pair already exists."""

		async def _insert(connection: asyncpg.Connection) -> models.ClubMembership | None:
			record = await connection.fetchrow(
				"""
				INSERT INTO club_membership (user_id, club_id)
				VALUES ($1, $2)
				ON CONFLICT (user_id, club_id) DO NOTHING
				RETURNING *
				""",
				user_id,
				str(club_id),
			)
			return models.ClubMembership.model_validate(dict(record)) if record else None

		return await self._run(conn, _insert)

	async def get_membership(
		self,
		user_id: str,
		club_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.ClubMembership | None:
		async def _fetch(connection: asyncpg.Connection) -> models.ClubMembership | None:
			record = await connection.fetchrow(
				"SELECT * FROM club_membership WHERE user_id=$1 AND club_id=$2",
				user_id,
				str(club_id),
			)
			return models.ClubMembership.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def get_membership_by_id(self, membership_id: UUID) -> models.ClubMembership | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow("SELECT * FROM club_membership WHERE id=$1", str(membership_id))
		return models.ClubMembership.model_validate(dict(record)) if record else None

	async def delete_membership(self, user_id: str, club_id: UUID) -> models.ClubMembership | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"DELETE FROM club_membership WHERE user_id=$1 AND club_id=$2 RETURNING *",
				user_id,
				str(club_id),
			)
		return models.ClubMembership.model_validate(dict(record)) if record else None

	async def delete_membership_by_id(self, membership_id: UUID) -> models.ClubMembership | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"DELETE FROM club_membership WHERE id=$1 RETURNING *",
				str(membership_id),
			)
		return models.ClubMembership.model_validate(dict(record)) if record else None

	async def list_club_memberships(self, club_id: UUID) -> list[models.ClubMembership]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"SELECT * FROM club_membership WHERE club_id=$1 ORDER BY join_date ASC",
				str(club_id),
			)
		return [models.ClubMembership.model_validate(dict(row)) for row in rows]

	# --- Events -----------------------------------------------------------

	async def create_event(
		self,
		*,
		club_id: UUID,
		name: str,
		description: str,
		date_time: datetime,
		location: str,
		banner_url: str | None,
		created_by: str,
		conn: asyncpg.Connection,
	) -> tuple[models.ClubEvent, models.EventCounter]:
		record = await conn.fetchrow(
			"""
			INSERT INTO club_event (club_id, name, description, date_time, location, banner_url, created_by)
			VALUES ($1, $2, $3, $4, $5, $6, $7)
			RETURNING *
			""",
			str(club_id),
			name,
			description,
			date_time,
			location,
			banner_url,
			created_by,
		)
		event = models.ClubEvent.model_validate(dict(record))
		counter_row = await conn.fetchrow(
			"""
			INSERT INTO event_counter (event_id)
			VALUES ($1)
			ON CONFLICT (event_id) DO UPDATE SET updated_at = NOW()
			RETURNING event_id, registered, checked_in, updated_at
			""",
			str(event.id),
		)
		return event, models.EventCounter.model_validate(dict(counter_row))

	async def get_event(
		self,
		event_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
		for_update: bool = False,
	) -> models.ClubEvent | None:
		query = "SELECT * FROM club_event WHERE id=$1"
		if for_update:
			query += " FOR UPDATE"

		async def _fetch(connection: asyncpg.Connection) -> models.ClubEvent | None:
			record = await connection.fetchrow(query, str(event_id))
			return models.ClubEvent.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def update_event(
		self,
		event_id: UUID,
		*,
		name: str | None = None,
		description: str | None = None,
		location: str | None = None,
		date_time: datetime | None = None,
	) -> models.ClubEvent | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"""
				UPDATE club_event
				SET name = COALESCE($2, name),
					description = COALESCE($3, description),
					location = COALESCE($4, location),
					date_time = COALESCE($5, date_time),
					updated_at = NOW()
				WHERE id = $1
				RETURNING *
				""",
				str(event_id),
				name,
				description,
				location,
				date_time,
			)
		return models.ClubEvent.model_validate(dict(record)) if record else None

	async def delete_event(self, event_id: UUID) -> bool:
		pool = await get_pool()
		async with pool.acquire() as conn:
			result = await conn.execute("DELETE FROM club_event WHERE id=$1", str(event_id))
		return result.endswith(" 1")

	async def get_event_with_counter(
		self,
		event_id: UUID,
	) -> tuple[models.ClubEvent, models.EventCounter] | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(_EVENT_WITH_COUNTER + " WHERE e.id = $1", str(event_id))
		return _event_with_counter(record) if record else None

	async def list_club_events(
		self,
		club_id: UUID,
		*,
		scope: str,
		now: Optional[datetime] = None,
	) -> list[tuple[models.ClubEvent, models.EventCounter]]:
		reference = now or datetime.now(timezone.utc)
		if scope == "upcoming":
			query = _EVENT_WITH_COUNTER + " WHERE e.club_id = $1 AND e.date_time > $2 ORDER BY e.date_time ASC"
			params: list[Any] = [str(club_id), reference]
		elif scope == "past":
			query = _EVENT_WITH_COUNTER + " WHERE e.club_id = $1 AND e.date_time <= $2 ORDER BY e.date_time DESC"
			params = [str(club_id), reference]
		else:
			query = _EVENT_WITH_COUNTER + " WHERE e.club_id = $1 ORDER BY e.date_time ASC"
			params = [str(club_id)]
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(query, *params)
		return [_event_with_counter(row) for row in rows]

	async def get_event_counter(
		self,
		event_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.EventCounter:
		async def _fetch(connection: asyncpg.Connection) -> models.EventCounter:
			row = await connection.fetchrow(
				"SELECT event_id, registered, checked_in, updated_at FROM event_counter WHERE event_id=$1",
				str(event_id),
			)
			if not row:
				return models.EventCounter(event_id=event_id)
			return models.EventCounter.model_validate(dict(row))

		return await self._run(conn, _fetch)

	async def adjust_event_counter(
		self,
		event_id: UUID,
		*,
		conn: asyncpg.Connection,
		registered_delta: int = 0,
		checked_in_delta: int = 0,
	) -> models.EventCounter:
		row = await conn.fetchrow(
			"""
			INSERT INTO event_counter (event_id, registered, checked_in)
			VALUES ($1, GREATEST($2, 0), GREATEST($3, 0))
			ON CONFLICT (event_id) DO UPDATE
			SET registered = GREATEST(event_counter.registered + $2, 0),
				checked_in = GREATEST(event_counter.checked_in + $3, 0),
				updated_at = NOW()
			RETURNING event_id, registered, checked_in, updated_at
			""",
			str(event_id),
			registered_delta,
			checked_in_delta,
		)
		return models.EventCounter.model_validate(dict(row))

	async def set_event_report(self, event_id: UUID, report: str) -> models.ClubEvent | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"""
				UPDATE club_event
				SET report = $2, report_generated_at = NOW(), updated_at = NOW()
				WHERE id = $1
				RETURNING *
				""",
				str(event_id),
				report,
			)
		return models.ClubEvent.model_validate(dict(record)) if record else None

	# --- Registrations ----------------------------------------------------

	async def insert_registration(
		self,
		*,
		user_id: str,
		event_id: UUID,
		qr_code: str,
		conn: asyncpg.Connection,
	) -> models.Registration | None:
		"""Insert a registration; returns None when the (user, event) pair already exists."""
		record = await conn.fetchrow(
			"""
			INSERT INTO event_registration (user_id, event_id, qr_code)
			VALUES ($1, $2, $3)
			ON CONFLICT (user_id, event_id) DO NOTHING
			RETURNING *
			""",
			user_id,
			str(event_id),
			qr_code,
		)
		return models.Registration.model_validate(dict(record)) if record else None

	async def get_registration(
		self,
		user_id: str,
		event_id: UUID,
		*,
		conn: asyncpg.Connection | None = None,
	) -> models.Registration | None:
		async def _fetch(connection: asyncpg.Connection) -> models.Registration | None:
			record = await connection.fetchrow(
				"SELECT * FROM event_registration WHERE user_id=$1 AND event_id=$2",
				user_id,
				str(event_id),
			)
			return models.Registration.model_validate(dict(record)) if record else None

		return await self._run(conn, _fetch)

	async def delete_registration(
		self,
		user_id: str,
		event_id: UUID,
		*,
		conn: asyncpg.Connection,
	) -> models.Registration | None:
		record = await conn.fetchrow(
			"DELETE FROM event_registration WHERE user_id=$1 AND event_id=$2 RETURNING *",
			user_id,
			str(event_id),
		)
		return models.Registration.model_validate(dict(record)) if record else None

	async def mark_checked_in(
		self,
		user_id: str,
		event_id: UUID,
		*,
		conn: asyncpg.Connection,
	) -> models.Registration | None:
		"""Stamp the check-in time; returns None when already checked in."""
		record = await conn.fetchrow(
			"""
			UPDATE event_registration
			SET checked_in_at = NOW()
			WHERE user_id = $1 AND event_id = $2 AND checked_in_at IS NULL
			RETURNING *
			""",
			user_id,
			str(event_id),
		)
		return models.Registration.model_validate(dict(record)) if record else None

	async def list_user_registrations(
		self,
		user_id: str,
	) -> list[tuple[models.Registration, models.ClubEvent]]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"""
				SELECT r.id AS registration_id,
					r.user_id AS registration_user_id,
					r.registration_date,
					r.qr_code,
					r.checked_in_at,
					e.*
				FROM event_registration r
				JOIN club_event e ON e.id = r.event_id
				WHERE r.user_id = $1
				ORDER BY e.date_time ASC
				""",
				user_id,
			)
		items: list[tuple[models.Registration, models.ClubEvent]] = []
		for row in rows:
			data = dict(row)
			event = models.ClubEvent.model_validate(data)
			registration = models.Registration(
				id=data["registration_id"],
				user_id=data["registration_user_id"],
				event_id=event.id,
				registration_date=data["registration_date"],
				qr_code=data["qr_code"],
				checked_in_at=data["checked_in_at"],
			)
			items.append((registration, event))
		return items

	# --- Announcements ----------------------------------------------------

	async def create_announcement(
		self,
		*,
		club_id: UUID,
		title: str,
		content: str,
		created_by: str,
	) -> models.Announcement:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow(
				"""
				INSERT INTO club_announcement (club_id, title, content, created_by)
				VALUES ($1, $2, $3, $4)
				RETURNING *
				""",
				str(club_id),
				title,
				content,
				created_by,
			)
		return models.Announcement.model_validate(dict(record))

	async def get_announcement(self, announcement_id: UUID) -> models.Announcement | None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			record = await conn.fetchrow("SELECT * FROM club_announcement WHERE id=$1", str(announcement_id))
		return models.Announcement.model_validate(dict(record)) if record else None

	async def list_announcements(self, club_id: UUID) -> list[models.Announcement]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"SELECT * FROM club_announcement WHERE club_id=$1 ORDER BY created_at DESC",
				str(club_id),
			)
		return [models.Announcement.model_validate(dict(row)) for row in rows]

	async def delete_announcement(self, announcement_id: UUID) -> bool:
		pool = await get_pool()
		async with pool.acquire() as conn:
			result = await conn.execute("DELETE FROM club_announcement WHERE id=$1", str(announcement_id))
		return result.endswith(" 1")
