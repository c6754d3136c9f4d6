from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

import httpx
import structlog

from moviecache.core.config import Settings, settings
from moviecache.schemas import (
    MovieDetail,
    MovieSearchResponse,
    parse_movie_detail,
    parse_search_response,
)

_logger = structlog.get_logger(__name__)

_DEFAULT_HEADERS = {"User-Agent": "MovieCache/1.0"}


class OmdbConfigurationError(RuntimeError):
    """Raised when OMDb cannot be queried due to missing configuration."""


class OmdbRequestError(RuntimeError):
    """Raised when the upstream request fails or returns an unusable payload."""


class HttpClient(Protocol):
    def __enter__(self) -> HttpClient: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None: ...

    def get(
        self,
        url: str,
        *,
        params: dict[str, Any],
        timeout: httpx.Timeout,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response: ...


HttpClientFactory = Callable[[httpx.Timeout], HttpClient]


def _default_http_client_factory(timeout: httpx.Timeout) -> HttpClient:
    return httpx.Client(timeout=timeout)


class OmdbClient:
    """Thin client for the two OMDb lookups the cache relies on."""

    def __init__(
        self,
        *,
        settings_obj: Settings | None = None,
        http_client_factory: HttpClientFactory | None = None,
    ) -> None:
        self._settings = settings_obj or settings
        self._http_client_factory = http_client_factory or _default_http_client_factory
        self._timeout = httpx.Timeout(
            self._settings.omdb_request_timeout,
            connect=self._settings.omdb_connect_timeout,
        )

    def search_movies(self, text: str) -> MovieSearchResponse:
        payload = self._get({"s": text})
        try:
            return parse_search_response(payload)
        except ValueError as exc:
            _logger.warning("omdb.invalid_search_payload", query=text, error=str(exc))
            raise OmdbRequestError("OMDb returned an invalid search payload") from exc

    def get_movie(self, imdb_id: str) -> MovieDetail:
        payload = self._get({"i": imdb_id})
        try:
            return parse_movie_detail(payload)
        except ValueError as exc:
            _logger.warning(
                "omdb.invalid_detail_payload", imdb_id=imdb_id, error=str(exc)
            )
            raise OmdbRequestError("OMDb returned an invalid detail payload") from exc

    def _get(self, params: dict[str, Any]) -> Any:
        api_key = self._settings.omdb_api_key
        if not api_key:
            raise OmdbConfigurationError("OMDB_API_KEY is not configured")

        url = self._settings.omdb_api_url
        try:
            with self._http_client_factory(self._timeout) as client:
                response = client.get(
                    url,
                    params={"apikey": api_key, **params},
                    timeout=self._timeout,
                    headers=_DEFAULT_HEADERS,
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            _logger.warning("omdb.request_failed", error=str(exc), url=url)
            raise OmdbRequestError("Failed to query OMDb") from exc
        except ValueError as exc:
            _logger.warning("omdb.invalid_json", error=str(exc), url=url)
            raise OmdbRequestError("OMDb returned malformed JSON") from exc


__all__ = [
    "HttpClient",
    "HttpClientFactory",
    "OmdbClient",
    "OmdbConfigurationError",
    "OmdbRequestError",
]
