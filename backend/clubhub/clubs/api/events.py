"""Events API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.events_service import EventsService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:events"])
_service = EventsService()


@router.post("/clubs/{club_id}/events", response_model=dto.EventResponse, status_code=201)
async def create_event_endpoint(
	club_id: UUID,
	payload: dto.EventCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.EventResponse:
	try:
		return await _service.create_event(auth_user, club_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/{club_id}/events", response_model=dto.EventListResponse)
async def list_events_endpoint(
	club_id: UUID,
	scope: str | None = None,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.EventListResponse:
	try:
		return await _service.list_club_events(club_id, scope=scope)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/events/{event_id}", response_model=dto.EventResponse)
async def get_event_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.EventResponse:
	try:
		return await _service.get_event(event_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.patch("/events/{event_id}", response_model=dto.EventResponse)
async def update_event_endpoint(
	event_id: UUID,
	payload: dto.EventUpdateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.EventResponse:
	try:
		return await _service.update_event(auth_user, event_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/events/{event_id}",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def delete_event_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.delete_event(auth_user, event_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
