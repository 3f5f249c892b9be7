"""Registration and check-in API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.registration_service import RegistrationService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:registrations"])
_service = RegistrationService()


@router.post("/events/{event_id}/registrations", response_model=dto.RegistrationResponse, status_code=201)
async def register_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.RegistrationResponse:
	try:
		return await _service.register(auth_user, event_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/events/{event_id}/registrations/me",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def cancel_registration_endpoint(
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.cancel(auth_user, event_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.post("/events/{event_id}/check-in", response_model=dto.RegistrationResponse)
async def check_in_endpoint(
	event_id: UUID,
	payload: dto.CheckInRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.RegistrationResponse:
	try:
		return await _service.check_in(auth_user, event_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/me/registrations", response_model=dto.MyRegistrationListResponse)
async def list_my_registrations_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.MyRegistrationListResponse:
	try:
		return await _service.list_my_registrations(auth_user)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
