from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

from moviecache.core.config import Settings
from moviecache.models import Movie, SearchQuery, SearchResult
from moviecache.models.base import utcnow


@dataclass(slots=True)
class HealthComponent:
    name: str
    status: str
    details: Mapping[str, object]


def _overall_status(components: list[HealthComponent]) -> str:
    status_rank = {"ok": 0, "skipped": 0, "degraded": 1, "error": 2}
    worst = 0
    for component in components:
        worst = max(worst, status_rank.get(component.status, 1))
    for label, rank in status_rank.items():
        if rank == worst:
            return label
    return "degraded"


def _measure_database(session: Session) -> HealthComponent:
    start = time.perf_counter()
    try:
        session.exec(select(1)).one()
        duration_ms = round((time.perf_counter() - start) * 1000, 3)
        details: dict[str, object] = {"latency_ms": duration_ms}
        status = "ok"
    except Exception as exc:  # pragma: no cover - defensive logging
        details = {"error": str(exc)}
        status = "error"
    return HealthComponent(name="database", status=status, details=details)


def _describe_upstream(settings: Settings) -> HealthComponent:
    if not settings.omdb_api_key:
        return HealthComponent(
            name="omdb",
            status="degraded",
            details={"message": "OMDB_API_KEY not configured"},
        )
    return HealthComponent(
        name="omdb",
        status="ok",
        details={"url": settings.omdb_api_url},
    )


def _count(session: Session, model: type[SQLModel]) -> int:
    statement = select(func.count()).select_from(model)
    return session.exec(statement).one()


def collect_resource_counts(session: Session) -> dict[str, int]:
    negative = select(func.count()).select_from(SearchQuery).where(
        SearchQuery.response == False  # noqa: E712
    )
    return {
        "movies": _count(session, Movie),
        "search_queries": _count(session, SearchQuery),
        "negative_search_queries": session.exec(negative).one(),
        "search_results": _count(session, SearchResult),
    }


def build_readiness_report(session: Session, settings: Settings) -> dict[str, object]:
    components = [
        _measure_database(session),
        _describe_upstream(settings),
    ]
    status = _overall_status(components)
    return {
        "status": status,
        "checked_at": utcnow().astimezone(UTC).isoformat(),
        "components": {
            component.name: {"status": component.status, **component.details}
            for component in components
        },
    }


def build_metrics_payload(session: Session, settings: Settings) -> dict[str, object]:
    readiness = build_readiness_report(session, settings)
    counts = collect_resource_counts(session)
    return {
        "generated_at": utcnow().astimezone(UTC).isoformat(),
        "readiness": readiness,
        "resource_counts": counts,
    }


__all__ = [
    "build_metrics_payload",
    "build_readiness_report",
    "collect_resource_counts",
]
