from __future__ import annotations

from typing import Any, cast

import httpx
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

import moviecache.models as models
from moviecache.services.movie_cache import (
    MovieCacheService,
    set_movie_cache_service_factory,
)

BATMAN_BEGINS = {
    "Title": "Batman Begins",
    "Year": "2005",
    "imdbID": "tt0372784",
    "Type": "movie",
    "Poster": "https://img.example/bb.jpg",
}

BATMAN_BEGINS_DETAIL = {
    **BATMAN_BEGINS,
    "Plot": "A young Bruce Wayne travels to the Far East.",
    "Director": "Christopher Nolan",
    "Actors": "Christian Bale, Michael Caine",
    "Runtime": "140 min",
    "Genre": "Action, Crime, Drama",
    "imdbRating": "8.2",
    "Response": "True",
}


class ExplodingService:
    def search(self, session: Session, *, query: str) -> Any:
        raise RuntimeError("boom")

    def get_by_id(self, session: Session, *, imdb_id: str) -> Any:
        raise RuntimeError("boom")


def test_search_returns_omdb_shaped_payload(
    client: TestClient, fake_omdb: Any
) -> None:
    fake_omdb.responses.append(
        {"Search": [BATMAN_BEGINS], "totalResults": "1", "Response": "True"}
    )

    response = client.get("/api/movies/search", params={"q": "batman"})

    assert response.status_code == 200
    assert response.json() == {
        "Search": [BATMAN_BEGINS],
        "totalResults": "1",
        "Response": "True",
    }
    assert fake_omdb.calls[0]["params"]["s"] == "batman"


def test_repeat_search_does_not_reach_upstream(
    client: TestClient, fake_omdb: Any, engine: Engine
) -> None:
    fake_omdb.responses.append(
        {"Search": [BATMAN_BEGINS], "totalResults": "1", "Response": "True"}
    )

    first = client.get("/api/movies/search", params={"q": "batman"})
    second = client.get("/api/movies/search", params={"q": "  batman  "})

    assert second.json() == first.json()
    assert len(fake_omdb.calls) == 1
    with Session(engine) as session:
        queries = session.exec(select(models.SearchQuery)).all()
        assert [query.search_text for query in queries] == ["batman"]


def test_negative_search_is_rendered_with_error(
    client: TestClient, fake_omdb: Any
) -> None:
    fake_omdb.responses.append({"Response": "False", "Error": "Movie not found!"})

    response = client.get("/api/movies/search", params={"q": "zzzzqqq"})

    assert response.status_code == 200
    assert response.json() == {"Response": "False", "Error": "Movie not found!"}


def test_search_upstream_failure_collapses_to_failed_response(
    client: TestClient, fake_omdb: Any
) -> None:
    fake_omdb.responses.append(httpx.ConnectError("connection refused"))

    response = client.get("/api/movies/search", params={"q": "batman"})

    assert response.status_code == 200
    assert response.json() == {"Response": "False"}


def test_search_unexpected_error_collapses_to_failed_response(
    client: TestClient,
) -> None:
    set_movie_cache_service_factory(
        lambda: cast(MovieCacheService, ExplodingService())
    )

    response = client.get("/api/movies/search", params={"q": "batman"})

    assert response.status_code == 200
    assert response.json() == {"Response": "False"}


def test_search_rejects_blank_query(client: TestClient, fake_omdb: Any) -> None:
    response = client.get("/api/movies/search", params={"q": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Query must not be empty"
    assert fake_omdb.calls == []


def test_search_requires_query_parameter(client: TestClient) -> None:
    response = client.get("/api/movies/search")

    assert response.status_code == 422


def test_get_movie_returns_detail(client: TestClient, fake_omdb: Any) -> None:
    fake_omdb.responses.append(BATMAN_BEGINS_DETAIL)

    response = client.get("/api/movies/tt0372784")

    assert response.status_code == 200
    assert response.json() == BATMAN_BEGINS_DETAIL
    assert fake_omdb.calls[0]["params"]["i"] == "tt0372784"


def test_get_movie_served_from_cache_after_first_lookup(
    client: TestClient, fake_omdb: Any
) -> None:
    fake_omdb.responses.append(BATMAN_BEGINS_DETAIL)

    first = client.get("/api/movies/tt0372784")
    second = client.get("/api/movies/tt0372784")

    assert second.status_code == 200
    assert second.json() == first.json()
    assert len(fake_omdb.calls) == 1


def test_get_movie_not_found(client: TestClient, fake_omdb: Any) -> None:
    fake_omdb.responses.append({"Response": "False", "Error": "Incorrect IMDb ID."})

    response = client.get("/api/movies/tt9999999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Movie not found"


def test_get_movie_upstream_failure_is_not_found(
    client: TestClient, fake_omdb: Any
) -> None:
    fake_omdb.responses.append(httpx.ReadTimeout("timed out"))

    response = client.get("/api/movies/tt0372784")

    assert response.status_code == 404


def test_get_movie_unexpected_error_is_not_found(client: TestClient) -> None:
    set_movie_cache_service_factory(
        lambda: cast(MovieCacheService, ExplodingService())
    )

    response = client.get("/api/movies/tt0372784")

    assert response.status_code == 404


def test_get_movie_rejects_blank_identifier(
    client: TestClient, fake_omdb: Any
) -> None:
    response = client.get("/api/movies/%20%20")

    assert response.status_code == 400
    assert fake_omdb.calls == []
