"""Club lifecycle API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.clubs_service import ClubsService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:clubs"])
_service = ClubsService()


@router.post("/clubs", response_model=dto.ClubResponse, status_code=201)
async def propose_club_endpoint(
	payload: dto.ClubCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubResponse:
	try:
		return await _service.propose_club(auth_user, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs", response_model=dto.ClubListResponse)
async def list_clubs_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubListResponse:
	try:
		return await _service.list_clubs()
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/pending", response_model=dto.ClubListResponse)
async def list_pending_clubs_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubListResponse:
	try:
		return await _service.list_pending_clubs(auth_user)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/{club_id}", response_model=dto.ClubResponse)
async def get_club_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubResponse:
	try:
		return await _service.get_club(club_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.post("/clubs/{club_id}/decision", response_model=dto.ClubResponse)
async def decide_club_endpoint(
	club_id: UUID,
	payload: dto.ClubDecisionRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubResponse:
	try:
		return await _service.decide_club(auth_user, club_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/clubs/{club_id}",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def delete_club_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.delete_club(auth_user, club_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
