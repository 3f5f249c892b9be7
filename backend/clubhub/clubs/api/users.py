"""Profile API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.users_service import UsersService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:users"])
_service = UsersService()


@router.post("/me", response_model=dto.ProfileResponse, status_code=201)
async def bootstrap_profile_endpoint(
	payload: dto.ProfileCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ProfileResponse:
	try:
		return await _service.bootstrap_profile(auth_user, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/me", response_model=dto.ProfileResponse)
async def get_profile_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ProfileResponse:
	try:
		return await _service.get_profile(auth_user)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.patch("/me", response_model=dto.ProfileResponse)
async def update_profile_endpoint(
	payload: dto.ProfileUpdateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ProfileResponse:
	try:
		return await _service.update_profile(auth_user, payload)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/me/clubs", response_model=dto.ClubListResponse)
async def list_my_clubs_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ClubListResponse:
	try:
		return await _service.list_my_clubs(auth_user)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/users", response_model=dto.UserListResponse)
async def list_users_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.UserListResponse:
	try:
		return await _service.list_users(auth_user)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
