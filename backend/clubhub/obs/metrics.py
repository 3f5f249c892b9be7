"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram


REQUEST_COUNTER = Counter(
	"clubhub_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"clubhub_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

CLUBS_PROPOSED = Counter(
	"clubhub_clubs_proposed_total",
	"Clubs submitted for approval",
)

CLUB_DECISIONS = Counter(
	"clubhub_club_decisions_total",
	"Club approval decisions",
	["decision"],
)

CLUBS_DELETED = Counter(
	"clubhub_clubs_deleted_total",
	"Clubs deleted together with their dependents",
)

MEMBERSHIP_CHANGES = Counter(
	"clubhub_membership_changes_total",
	"Club membership changes",
	["action"],
)

EVENTS_CHANGED = Counter(
	"clubhub_events_changed_total",
	"Club events created, edited or deleted",
	["action"],
)

REGISTRATIONS = Counter(
	"clubhub_event_registrations_total",
	"Event registrations by action",
	["action"],
)

CHECK_INS = Counter(
	"clubhub_event_check_ins_total",
	"Entry pass check-in attempts",
	["result"],
)

ANNOUNCEMENTS_CREATED = Counter(
	"clubhub_announcements_created_total",
	"Announcements published by club admins",
)

REPORT_GENERATIONS = Counter(
	"clubhub_report_generations_total",
	"Event report generation attempts",
	["result"],
)

REPORT_LATENCY = Histogram(
	"clubhub_report_generation_seconds",
	"Latency of the text-generation call",
	buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0),
)

DEPENDENCY_UP = Gauge(
	"clubhub_dependency_up",
	"Whether a backing dependency answered its last health check",
	["dependency"],
)

DEPENDENCY_LATENCY = Histogram(
	"clubhub_dependency_check_seconds",
	"Latency of dependency health checks",
	["dependency"],
	buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_club_proposed() -> None:
	CLUBS_PROPOSED.inc()


def inc_club_decision(decision: str) -> None:
	CLUB_DECISIONS.labels(decision=decision).inc()


def inc_club_deleted() -> None:
	CLUBS_DELETED.inc()


def inc_membership_change(action: str) -> None:
	MEMBERSHIP_CHANGES.labels(action=action).inc()


def inc_event_changed(action: str) -> None:
	EVENTS_CHANGED.labels(action=action).inc()


def inc_registration(action: str) -> None:
	REGISTRATIONS.labels(action=action).inc()


def inc_check_in(result: str) -> None:
	CHECK_INS.labels(result=result).inc()


def inc_announcement_created() -> None:
	ANNOUNCEMENTS_CREATED.inc()


def inc_report_generation(result: str) -> None:
	REPORT_GENERATIONS.labels(result=result).inc()


def observe_report_latency(elapsed_seconds: float) -> None:
	REPORT_LATENCY.observe(elapsed_seconds)


def mark_redis(ok: bool, *, latency_seconds: float | None = None) -> None:
	DEPENDENCY_UP.labels(dependency="redis").set(1 if ok else 0)
	if latency_seconds is not None:
		DEPENDENCY_LATENCY.labels(dependency="redis").observe(latency_seconds)


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	DEPENDENCY_UP.labels(dependency="postgres").set(1 if ok else 0)
	if latency_seconds is not None:
		DEPENDENCY_LATENCY.labels(dependency="postgres").observe(latency_seconds)
