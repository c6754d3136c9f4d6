from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import moviecache.models  # noqa: F401
from moviecache.core.config import Settings
from moviecache.core.database import get_session
from moviecache.main import app
from moviecache.services.movie_cache import (
    MovieCacheService,
    set_movie_cache_service_factory,
)
from moviecache.services.omdb import HttpClient, OmdbClient


class FakeOmdb:
    """Queue of OMDb payloads shared by every client the service opens."""

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        return None

    def get(
        self,
        url: str,
        *,
        params: dict[str, Any],
        timeout: httpx.Timeout,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        self.calls.append({"url": url, "params": params})
        if not self.responses:
            raise AssertionError("Unexpected HTTP call")
        payload = self.responses.pop(0)
        if isinstance(payload, Exception):
            raise payload
        request = httpx.Request("GET", url, params=params)
        return httpx.Response(status_code=200, json=payload, request=request)


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


@pytest.fixture(name="fake_omdb")
def fake_omdb_fixture() -> Iterator[FakeOmdb]:
    fake = FakeOmdb()

    def factory(timeout: httpx.Timeout) -> HttpClient:
        return fake

    omdb = OmdbClient(
        settings_obj=Settings(omdb_api_key="test-key"),
        http_client_factory=factory,
    )
    set_movie_cache_service_factory(lambda: MovieCacheService(omdb_client=omdb))
    try:
        yield fake
    finally:
        set_movie_cache_service_factory(None)


@pytest.fixture(name="client")
def client_fixture(engine: Engine, fake_omdb: FakeOmdb) -> Iterator[TestClient]:
    def override_get_session() -> Iterator[Session]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_session, None)
