"""Text-generation collaborator used for event reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from clubhub.clubs.domain.exceptions import ExternalServiceError
from clubhub.settings import settings

_PROMPT_TEMPLATE = (
	"Write a short post-event report for a college club.\n"
	"Event name: {event_name}\n"
	"Event description: {event_description}\n"
	"Number of registered attendees: {attendee_count}\n"
	"Summarise the event, comment on turnout and suggest one improvement."
)


@dataclass(frozen=True)
class ReportInput:
	"""Aggregated event facts handed to the generator."""

	event_name: str
	event_description: str
	attendee_count: int

	def prompt(self) -> str:
		return _PROMPT_TEMPLATE.format(
			event_name=self.event_name,
			event_description=self.event_description,
			attendee_count=self.attendee_count,
		)


class TextGenerator(Protocol):
	"""Interface for report text generation."""

	async def generate_report(self, data: ReportInput) -> str:
		...


def _extract_text(body: Any) -> str:
	try:
		candidates = body["candidates"]
		parts = candidates[0]["content"]["parts"]
	except (KeyError, IndexError, TypeError) as exc:
		raise ExternalServiceError("text_generation_malformed_response") from exc
	text = "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict)).strip()
	if not text:
		raise ExternalServiceError("text_generation_empty_response")
	return text


def _upstream_message(response: httpx.Response) -> str:
	try:
		message = response.json().get("error", {}).get("message")
	except (ValueError, AttributeError):
		message = None
	return message or f"text_generation_http_{response.status_code}"


@dataclass
class GenerativeLanguageClient(TextGenerator):
	"""Calls the hosted generative-language ``generateContent`` endpoint once, without retry."""

	api_key: str | None = None
	model: str | None = None
	base_url: str | None = None
	request_timeout: float | None = None
	http: httpx.AsyncClient | None = None

	def _endpoint(self) -> str:
		base = (self.base_url or settings.genai_base_url).rstrip("/")
		return f"{base}/models/{self.model or settings.genai_model}:generateContent"

	async def generate_report(self, data: ReportInput) -> str:
		api_key = self.api_key or settings.genai_api_key
		if not api_key:
			raise ExternalServiceError("text_generation_not_configured")
		timeout = self.request_timeout or settings.genai_timeout_seconds
		payload = {"contents": [{"role": "user", "parts": [{"text": data.prompt()}]}]}
		headers = {"x-goog-api-key": api_key, "Content-Type": "application/json"}
		try:
			if self.http is not None:
				response = await self.http.post(self._endpoint(), json=payload, headers=headers, timeout=timeout)
			else:
				async with httpx.AsyncClient(timeout=timeout) as client:
					response = await client.post(self._endpoint(), json=payload, headers=headers)
		except httpx.TimeoutException as exc:
			raise ExternalServiceError("text_generation_timeout") from exc
		except httpx.HTTPError as exc:
			raise ExternalServiceError(str(exc) or "text_generation_unreachable") from exc
		if response.status_code >= 400:
			raise ExternalServiceError(_upstream_message(response))
		try:
			body = response.json()
		except ValueError as exc:
			raise ExternalServiceError("text_generation_malformed_response") from exc
		return _extract_text(body)
