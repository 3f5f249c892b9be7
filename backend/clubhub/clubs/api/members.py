"""Membership API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.members_service import MembersService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:members"])
_service = MembersService()


@router.post("/clubs/{club_id}/join", response_model=dto.MembershipResponse, status_code=201)
async def join_club_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.MembershipResponse:
	try:
		return await _service.join_club(auth_user, club_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/clubs/{club_id}/membership",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def leave_club_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.leave_club(auth_user, club_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/{club_id}/members", response_model=dto.MemberListResponse)
async def list_members_endpoint(
	club_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.MemberListResponse:
	try:
		return await _service.list_members(club_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.post("/clubs/{club_id}/members", response_model=dto.MembershipResponse, status_code=201)
async def add_member_endpoint(
	club_id: UUID,
	payload: dto.MemberAddRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.MembershipResponse:
	try:
		return await _service.add_member(auth_user, club_id, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.delete(
	"/memberships/{membership_id}",
	status_code=204,
	response_class=Response,
	response_model=None,
)
async def remove_member_endpoint(
	membership_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> None:
	try:
		await _service.remove_member(auth_user, membership_id)
		return None
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
