"""Pydantic schemas for the clubs API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from clubhub.clubs.domain import models


# --- Profiles ---------------------------------------------------------------


class ProfileCreateRequest(BaseModel):
	first_name: str = Field(..., max_length=80)
	last_name: str = Field(..., max_length=80)
	department: Optional[str] = Field(default=None, max_length=120)
	year: Optional[int] = Field(default=None, ge=1, le=8)


class ProfileUpdateRequest(BaseModel):
	first_name: Optional[str] = Field(default=None, max_length=80)
	last_name: Optional[str] = Field(default=None, max_length=80)
	department: Optional[str] = Field(default=None, max_length=120)
	year: Optional[int] = Field(default=None, ge=1, le=8)


class ProfileResponse(BaseModel):
	id: str
	email: str
	first_name: str
	last_name: str
	role: str
	admin_of: List[UUID] = Field(default_factory=list)
	department: Optional[str] = None
	year: Optional[int] = None
	is_global_admin: bool = False
	created_at: datetime

	@classmethod
	def from_model(cls, profile: models.UserProfile, *, is_global_admin: bool = False) -> "ProfileResponse":
		return cls(
			id=profile.id,
			email=profile.email,
			first_name=profile.first_name,
			last_name=profile.last_name,
			role=profile.role,
			admin_of=list(profile.admin_of),
			department=profile.department,
			year=profile.year,
			is_global_admin=is_global_admin,
			created_at=profile.created_at,
		)


class UserListResponse(BaseModel):
	items: List[ProfileResponse]


# --- Clubs ------------------------------------------------------------------


class ClubCreateRequest(BaseModel):
	name: str = Field(..., max_length=80)
	description: str = Field(..., max_length=4000)


class ClubDecisionRequest(BaseModel):
	decision: str


class ClubResponse(BaseModel):
	id: UUID
	name: str
	description: str
	admin_id: str
	logo_url: Optional[str] = None
	status: str
	decided_at: Optional[datetime] = None
	created_at: datetime
	member_count: Optional[int] = None
	upcoming_event_count: Optional[int] = None

	@classmethod
	def from_model(
		cls,
		club: models.Club,
		*,
		member_count: int | None = None,
		upcoming_event_count: int | None = None,
	) -> "ClubResponse":
		return cls(
			id=club.id,
			name=club.name,
			description=club.description,
			admin_id=club.admin_id,
			logo_url=club.logo_url,
			status=club.status,
			decided_at=club.decided_at,
			created_at=club.created_at,
			member_count=member_count,
			upcoming_event_count=upcoming_event_count,
		)


class ClubListResponse(BaseModel):
	items: List[ClubResponse]


# --- Memberships ------------------------------------------------------------


class MemberAddRequest(BaseModel):
	email: str = Field(..., min_length=3, max_length=320)


class MembershipResponse(BaseModel):
	id: UUID
	user_id: str
	club_id: UUID
	join_date: datetime

	@classmethod
	def from_model(cls, membership: models.ClubMembership) -> "MembershipResponse":
		return cls(
			id=membership.id,
			user_id=membership.user_id,
			club_id=membership.club_id,
			join_date=membership.join_date,
		)


class MemberResponse(BaseModel):
	membership_id: UUID
	user_id: str
	email: str
	first_name: str
	last_name: str
	department: Optional[str] = None
	year: Optional[int] = None
	join_date: datetime
	is_club_admin: bool = False


class MemberListResponse(BaseModel):
	items: List[MemberResponse]


# --- Events -----------------------------------------------------------------


class EventCreateRequest(BaseModel):
	name: str = Field(..., max_length=120)
	description: str = Field(..., max_length=8000)
	location: str = Field(..., max_length=200)
	date_time: datetime


class EventUpdateRequest(BaseModel):
	name: Optional[str] = Field(default=None, max_length=120)
	description: Optional[str] = Field(default=None, max_length=8000)
	location: Optional[str] = Field(default=None, max_length=200)
	date_time: Optional[datetime] = None


class EventResponse(BaseModel):
	id: UUID
	club_id: UUID
	name: str
	description: str
	location: str
	date_time: datetime
	banner_url: Optional[str] = None
	is_past: bool
	attendee_count: int = 0
	checked_in_count: int = 0
	has_report: bool = False
	created_at: datetime

	@classmethod
	def from_model(
		cls,
		event: models.ClubEvent,
		counter: models.EventCounter | None = None,
		*,
		now: datetime | None = None,
	) -> "EventResponse":
		return cls(
			id=event.id,
			club_id=event.club_id,
			name=event.name,
			description=event.description,
			location=event.location,
			date_time=event.date_time,
			banner_url=event.banner_url,
			is_past=event.is_past(now),
			attendee_count=counter.registered if counter else 0,
			checked_in_count=counter.checked_in if counter else 0,
			has_report=bool(event.report),
			created_at=event.created_at,
		)


class EventListResponse(BaseModel):
	items: List[EventResponse]


# --- Registrations ----------------------------------------------------------


class RegistrationResponse(BaseModel):
	id: UUID
	user_id: str
	event_id: UUID
	registration_date: datetime
	qr_code: str
	checked_in_at: Optional[datetime] = None

	@classmethod
	def from_model(cls, registration: models.Registration) -> "RegistrationResponse":
		return cls(
			id=registration.id,
			user_id=registration.user_id,
			event_id=registration.event_id,
			registration_date=registration.registration_date,
			qr_code=registration.qr_code,
			checked_in_at=registration.checked_in_at,
		)


class MyRegistrationResponse(BaseModel):
	registration: RegistrationResponse
	event: EventResponse


class MyRegistrationListResponse(BaseModel):
	items: List[MyRegistrationResponse]


class CheckInRequest(BaseModel):
	token: str = Field(..., min_length=1, max_length=1024)


# --- Announcements ----------------------------------------------------------


class AnnouncementCreateRequest(BaseModel):
	title: str = Field(..., max_length=160)
	content: str = Field(..., max_length=8000)


class AnnouncementResponse(BaseModel):
	id: UUID
	club_id: UUID
	title: str
	content: str
	created_by: str
	created_at: datetime

	@classmethod
	def from_model(cls, announcement: models.Announcement) -> "AnnouncementResponse":
		return cls(
			id=announcement.id,
			club_id=announcement.club_id,
			title=announcement.title,
			content=announcement.content,
			created_by=announcement.created_by,
			created_at=announcement.created_at,
		)


class AnnouncementListResponse(BaseModel):
	items: List[AnnouncementResponse]


# --- Reports ----------------------------------------------------------------


class ReportResponse(BaseModel):
	club_id: UUID
	event_id: UUID
	report: str
	attendee_count: int
	generated_at: Optional[datetime] = None
