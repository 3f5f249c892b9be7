"""Event report API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from clubhub.clubs.api._errors import to_http_error
from clubhub.clubs.domain.report_service import ReportService
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["clubs:reports"])
_service = ReportService()


@router.post("/clubs/{club_id}/events/{event_id}/report", response_model=dto.ReportResponse)
async def generate_report_endpoint(
	club_id: UUID,
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ReportResponse:
	try:
		return await _service.generate_report(auth_user, club_id, event_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc


@router.get("/clubs/{club_id}/events/{event_id}/report", response_model=dto.ReportResponse)
async def get_report_endpoint(
	club_id: UUID,
	event_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> dto.ReportResponse:
	try:
		return await _service.get_report(auth_user, club_id, event_id)
	except Exception as exc:  # pragma: no cover
		raise to_http_error(exc) from exc
