"""Custom exceptions for club services."""

from __future__ import annotations

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:  # pragma: no cover - older Starlette builds
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class ClubsError(Exception):
	"""Base class for club domain errors."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "clubs_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class ValidationError(ClubsError):
	"""Raised when field constraints are not met."""

	status_code = _HTTP_422
	detail = "validation_error"


class ConflictError(ClubsError):
	"""Raised when a uniqueness rule is violated (duplicate membership, registration)."""

	status_code = status.HTTP_409_CONFLICT
	detail = "conflict"


class AuthorizationError(ClubsError):
	"""Raised when the actor lacks the required role or ownership."""

	status_code = status.HTTP_403_FORBIDDEN
	detail = "forbidden"


class NotFoundError(ClubsError):
	"""Raised when a referenced entity is absent."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class InvalidStateError(ClubsError):
	"""Raised when the entity is not in a state that allows the operation."""

	status_code = status.HTTP_409_CONFLICT
	detail = "invalid_state"


class ExternalServiceError(ClubsError):
	"""Raised when a collaborator (text generation) fails."""

	status_code = status.HTTP_502_BAD_GATEWAY
	detail = "external_service_error"
