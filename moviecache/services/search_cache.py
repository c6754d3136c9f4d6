from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast

from sqlalchemy import delete
from sqlmodel import Session, select

from moviecache.models import SearchQuery, SearchResult
from moviecache.models.base import utcnow


def _normalize_cutoff(value: datetime | None) -> datetime:
    if value is None:
        return utcnow()
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def prune_negative_searches(
    session: Session,
    *,
    before: datetime | None = None,
    dry_run: bool = False,
) -> tuple[int, datetime]:
    """Remove cached "no results" searches created on or before ``before``.

    Negative entries never expire on their own; this is the manual way to let
    such a query reach OMDb again. Returns the number of entries considered
    and the cutoff instant used. When ``dry_run`` is True the database is not
    modified and the count reflects how many rows would be deleted.
    """

    cutoff = _normalize_cutoff(before)
    statement = (
        select(SearchQuery)
        .where(SearchQuery.response == False)  # noqa: E712
        .where(SearchQuery.created_at <= cutoff)
    )
    entries = session.exec(statement).all()
    removed = len(entries)
    if dry_run or removed == 0:
        return removed, cutoff

    query_ids = [entry.id for entry in entries if entry.id is not None]
    link_query = cast(Any, SearchResult.search_query_id)
    session.exec(delete(SearchResult).where(link_query.in_(query_ids)))
    for entry in entries:
        session.delete(entry)
    session.commit()
    return removed, cutoff


__all__ = ["prune_negative_searches"]
