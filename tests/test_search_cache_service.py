from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from moviecache.models import Movie, SearchQuery, SearchResult
from moviecache.services.search_cache import prune_negative_searches


@pytest.fixture(name="engine")
def engine_fixture() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


def _insert_query(
    session: Session,
    *,
    text: str,
    response: bool,
    created_at: datetime,
) -> SearchQuery:
    entry = SearchQuery(
        search_text=text,
        response=response,
        total_results=None if not response else "1",
        error=None if response else "Movie not found!",
        created_at=created_at,
        updated_at=created_at,
    )
    session.add(entry)
    return entry


def test_prune_negative_searches_removes_only_negative_rows(engine: Engine) -> None:
    now = datetime.now(UTC)
    with Session(engine) as session:
        _insert_query(
            session, text="zzzzqqq", response=False, created_at=now - timedelta(days=2)
        )
        _insert_query(
            session, text="qqqq", response=False, created_at=now - timedelta(hours=1)
        )
        positive = _insert_query(
            session, text="batman", response=True, created_at=now - timedelta(days=3)
        )
        session.add(Movie(imdb_id="tt0372784", title="Batman Begins"))
        session.flush()
        assert positive.id is not None
        session.add(
            SearchResult(search_query_id=positive.id, imdb_id="tt0372784", position=0)
        )
        session.commit()

        removed, cutoff = prune_negative_searches(session)
        assert removed == 2
        assert cutoff.tzinfo is UTC

    with Session(engine) as session:
        remaining = session.exec(select(SearchQuery)).all()
        assert [entry.search_text for entry in remaining] == ["batman"]
        assert len(session.exec(select(SearchResult)).all()) == 1


def test_prune_negative_searches_dry_run_keeps_rows(engine: Engine) -> None:
    now = datetime.now(UTC)
    with Session(engine) as session:
        _insert_query(
            session, text="zzzzqqq", response=False, created_at=now - timedelta(days=1)
        )
        session.commit()

        removed, _ = prune_negative_searches(session, dry_run=True)
        assert removed == 1

    with Session(engine) as session:
        assert len(session.exec(select(SearchQuery)).all()) == 1


def test_prune_negative_searches_respects_custom_cutoff(engine: Engine) -> None:
    now = datetime.now(UTC)
    with Session(engine) as session:
        _insert_query(
            session, text="old", response=False, created_at=now - timedelta(days=10)
        )
        _insert_query(
            session, text="recent", response=False, created_at=now - timedelta(days=1)
        )
        session.commit()

        removed, cutoff = prune_negative_searches(
            session, before=now - timedelta(days=5)
        )
        assert removed == 1
        assert cutoff == (now - timedelta(days=5)).astimezone(UTC)

    with Session(engine) as session:
        remaining = session.exec(select(SearchQuery)).all()
        assert [entry.search_text for entry in remaining] == ["recent"]


def test_prune_negative_searches_treats_naive_cutoff_as_utc(engine: Engine) -> None:
    naive = datetime(2024, 1, 1, 12, 0, 0)
    with Session(engine) as session:
        _, cutoff = prune_negative_searches(session, before=naive, dry_run=True)

    assert cutoff == naive.replace(tzinfo=UTC)
