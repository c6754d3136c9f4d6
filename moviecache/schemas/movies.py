from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from moviecache.models.movie import MediaType

RESPONSE_TRUE = "True"
RESPONSE_FALSE = "False"

# OMDb field name -> internal attribute name.
SEARCH_ITEM_FIELDS: dict[str, str] = {
    "Title": "title",
    "Year": "year",
    "imdbID": "imdb_id",
    "Type": "media_type",
    "Poster": "poster",
}

SEARCH_RESPONSE_FIELDS: dict[str, str] = {
    "Search": "search",
    "totalResults": "total_results",
    "Response": "response",
    "Error": "error",
}

DETAIL_FIELDS: dict[str, str] = {
    **SEARCH_ITEM_FIELDS,
    "Plot": "plot",
    "Director": "director",
    "Actors": "actors",
    "Runtime": "runtime",
    "Genre": "genre",
    "imdbRating": "imdb_rating",
    "Response": "response",
    "Error": "error",
}


class MovieSearchItem(BaseModel):
    """One entry of a search result list."""

    title: str | None = None
    year: str | None = None
    imdb_id: str | None = None
    media_type: MediaType | None = None
    poster: str | None = None


class MovieSearchResponse(BaseModel):
    search: list[MovieSearchItem] | None = None
    total_results: str | None = None
    response: str = RESPONSE_FALSE
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.response == RESPONSE_TRUE

    @classmethod
    def failed(cls, error: str | None = None) -> MovieSearchResponse:
        return cls(response=RESPONSE_FALSE, error=error)


class MovieDetail(BaseModel):
    title: str | None = None
    year: str | None = None
    imdb_id: str | None = None
    media_type: MediaType | None = None
    poster: str | None = None
    plot: str | None = None
    director: str | None = None
    actors: str | None = None
    runtime: str | None = None
    genre: str | None = None
    imdb_rating: str | None = None
    response: str = RESPONSE_FALSE
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.response == RESPONSE_TRUE


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def _to_internal(
    payload: Mapping[str, Any], fields: Mapping[str, str]
) -> dict[str, Any]:
    return {fields[key]: value for key, value in payload.items() if key in fields}


def _to_wire(values: Mapping[str, Any], fields: Mapping[str, str]) -> dict[str, Any]:
    rendered: dict[str, Any] = {}
    for wire_name, attribute in fields.items():
        value = values.get(attribute)
        if value is not None:
            rendered[wire_name] = value
    return rendered


def parse_search_response(payload: Any) -> MovieSearchResponse:
    """Build a :class:`MovieSearchResponse` from a raw OMDb ``s=`` payload.

    Raises ``ValueError`` (including pydantic's ``ValidationError``) when the
    payload is not an object or an item does not match the schema, for
    example an unknown ``Type``.
    """

    values = _to_internal(_require_mapping(payload), SEARCH_RESPONSE_FIELDS)
    raw_items = values.get("search")
    if isinstance(raw_items, list):
        values["search"] = [
            (
                _to_internal(item, SEARCH_ITEM_FIELDS)
                if isinstance(item, Mapping)
                else item
            )
            for item in raw_items
        ]
    return MovieSearchResponse.model_validate(values)


def parse_movie_detail(payload: Any) -> MovieDetail:
    values = _to_internal(_require_mapping(payload), DETAIL_FIELDS)
    return MovieDetail.model_validate(values)


def render_search_response(response: MovieSearchResponse) -> dict[str, Any]:
    """Render a search response with OMDb field names, omitting empty fields."""

    values = response.model_dump(mode="json")
    items = values.get("search")
    if items is not None:
        values["search"] = [_to_wire(item, SEARCH_ITEM_FIELDS) for item in items]
    return _to_wire(values, SEARCH_RESPONSE_FIELDS)


def render_movie_detail(detail: MovieDetail) -> dict[str, Any]:
    return _to_wire(detail.model_dump(mode="json"), DETAIL_FIELDS)


__all__ = [
    "DETAIL_FIELDS",
    "RESPONSE_FALSE",
    "RESPONSE_TRUE",
    "SEARCH_ITEM_FIELDS",
    "SEARCH_RESPONSE_FIELDS",
    "MovieDetail",
    "MovieSearchItem",
    "MovieSearchResponse",
    "parse_movie_detail",
    "parse_search_response",
    "render_movie_detail",
    "render_search_response",
]
