"""FastAPI routers for the clubs domain."""

from __future__ import annotations

from fastapi import APIRouter

from clubhub.clubs.api import (
	announcements,
	clubs,
	events,
	members,
	registrations,
	reports,
	users,
)

router = APIRouter(prefix="/api/v1")

router.include_router(users.router)
router.include_router(clubs.router)
router.include_router(members.router)
router.include_router(events.router)
router.include_router(registrations.router)
router.include_router(announcements.router)
router.include_router(reports.router)

__all__ = ["router"]
