"""Announcements API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.announcements_service import AnnouncementsService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:announcements"])
_service = AnnouncementsService()


@router.post("/clubs/{club_id}/announcements", response_model=dto.AnnouncementResponse, status_code=201)
async def create_announcement_endpoint(
	club_id: UUID,
	payload: dto.AnnouncementCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.AnnouncementResponse:
	try:
		return await _service.create_announcement(auth_user, club_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/{club_id}/announcements", response_model=dto.AnnouncementListResponse)
async def list_announcements_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.AnnouncementListResponse:
	try:
		return await _service.list_announcements(auth_user, club_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/announcements/{announcement_id}",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def delete_announcement_endpoint(
	announcement_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.delete_announcement(auth_user, announcement_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
