"""Domain models for clubs, memberships, events and registrations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

CLUB_STATUSES = ("pending", "approved", "rejected")
USER_ROLES = ("student", "admin")


class UserProfile(BaseModel):
	"""Represents a user profile row."""

	id: str
	email: str
	first_name: str
	last_name: str
	role: str = "student"
	admin_of: list[UUID] = Field(default_factory=list)
	department: Optional[str] = None
	year: Optional[int] = None
	created_at: datetime
	updated_at: datetime

	model_config = ConfigDict(from_attributes=True)

	@property
	def display_name(self) -> str:
		return f"{self.first_name} {self.last_name}".strip()


class Club(BaseModel):
	"""Represents a club and its approval state."""

	id: UUID
	name: str
	description: str
	admin_id: str
	logo_url: Optional[str] = None
	status: str
	decided_by: Optional[str] = None
	decided_at: Optional[datetime] = None
	created_at: datetime
	updated_at: datetime

	model_config = ConfigDict(from_attributes=True)

	@property
	def is_approved(self) -> bool:
		return self.status == "approved"


class ClubMembership(BaseModel):
	"""Represents a membership row."""

	id: UUID
	user_id: str
	club_id: UUID
	join_date: datetime

	model_config = ConfigDict(from_attributes=True)


class ClubEvent(BaseModel):
	"""Represents a club event."""

	id: UUID
	club_id: UUID
	name: str
	description: str
	date_time: datetime
	location: str
	banner_url: Optional[str] = None
	report: Optional[str] = None
	report_generated_at: Optional[datetime] = None
	created_by: str
	created_at: datetime
	updated_at: datetime

	model_config = ConfigDict(from_attributes=True)

	def is_past(self, now: datetime | None = None) -> bool:
		reference = now or datetime.now(timezone.utc)
		return self.date_time < reference


class EventCounter(BaseModel):
	"""Aggregated attendance counters for an event."""

	event_id: UUID
	registered: int = 0
	checked_in: int = 0
	updated_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)


class Registration(BaseModel):
	"""Represents an event registration with its entry pass."""

	id: UUID
	user_id: str
	event_id: UUID
	registration_date: datetime
	qr_code: str
	checked_in_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)


class Announcement(BaseModel):
	"""Represents a club announcement."""

	id: UUID
	club_id: UUID
	title: str
	content: str
	created_by: str
	created_at: datetime

	model_config = ConfigDict(from_attributes=True)
