"""AI report generation for club events."""

from __future__ import annotations

import logging
import time
from uuid import UUID

from clubhub.clubs.domain import audit, lookups, models, policies, repo as repo_module
from clubhub.clubs.domain.exceptions import ExternalServiceError, NotFoundError
from clubhub.clubs.infra.text_generation import GenerativeLanguageClient, ReportInput, TextGenerator
from clubhub.clubs.schemas import dto
from clubhub.infra.auth import AuthenticatedUser
from clubhub.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class ReportService:
	"""Invokes the text generator once per request and stores the text only on success.

	Regenerating overwrites the previous report; no history is kept.
	"""

	def __init__(
		self,
		repository: repo_module.ClubsRepository | None = None,
		generator: TextGenerator | None = None,
	) -> None:
		self.repo = repository or repo_module.ClubsRepository()
		self.generator = generator or GenerativeLanguageClient()

	async def _load(self, user: AuthenticatedUser, club_id: UUID, event_id: UUID) -> models.ClubEvent:
		club = await lookups.require_club(self.repo, club_id)
		policies.assert_club_admin(club, user.id)
		event = await self.repo.get_event(event_id)
		if event is None or event.club_id != club.id:
			raise NotFoundError("event_not_found")
		return event

	async def generate_report(self, user: AuthenticatedUser, club_id: UUID, event_id: UUID) -> dto.ReportResponse:
		event = await self._load(user, club_id, event_id)
		counter = await self.repo.get_event_counter(event.id)
		data = ReportInput(
			event_name=event.name,
			event_description=event.description,
			attendee_count=counter.registered,
		)
		start = time.perf_counter()
		try:
			text = await self.generator.generate_report(data)
		except ExternalServiceError:
			obs_metrics.inc_report_generation("error")
			logger.warning("report_generation_failed", extra={"event_id": str(event.id)}, exc_info=True)
			raise
		except Exception as exc:
			obs_metrics.inc_report_generation("error")
			logger.warning("report_generation_failed", extra={"event_id": str(event.id)}, exc_info=True)
			raise ExternalServiceError(str(exc) or "text_generation_failed") from exc
		finally:
			obs_metrics.observe_report_latency(time.perf_counter() - start)
		updated = await self.repo.set_event_report(event.id, text)
		if updated is None:
			raise NotFoundError("event_not_found")
		await audit.log_event(
			"event.report_generated",
			user_id=user.id,
			meta={"event_id": event.id, "attendee_count": counter.registered},
		)
		obs_metrics.inc_report_generation("ok")
		return dto.ReportResponse(
			club_id=club_id,
			event_id=event.id,
			report=text,
			attendee_count=counter.registered,
			generated_at=updated.report_generated_at,
		)

	async def get_report(self, user: AuthenticatedUser, club_id: UUID, event_id: UUID) -> dto.ReportResponse:
		event = await self._load(user, club_id, event_id)
		if not event.report:
			raise NotFoundError("report_not_found")
		counter = await self.repo.get_event_counter(event.id)
		return dto.ReportResponse(
			club_id=club_id,
			event_id=event.id,
			report=event.report,
			attendee_count=counter.registered,
			generated_at=event.report_generated_at,
		)
