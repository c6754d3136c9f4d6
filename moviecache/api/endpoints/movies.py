from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from moviecache.core.database import get_session
from moviecache.schemas import (
    MovieSearchResponse,
    render_movie_detail,
    render_search_response,
)
from moviecache.services.movie_cache import MovieCacheService, get_movie_cache_service

router = APIRouter()
_logger = structlog.get_logger(__name__)


@router.get("/search", summary="Search titles by free text")
def search_movies(
    q: str = Query(..., max_length=255, description="Search text"),
    session: Session = Depends(get_session),
    movie_service: MovieCacheService = Depends(get_movie_cache_service),
) -> dict[str, Any]:
    query = q.strip()
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query must not be empty",
        )

    try:
        result = movie_service.search(session, query=query)
    except Exception:
        _logger.exception("movies.search.failed", query=query)
        result = MovieSearchResponse.failed()
    return render_search_response(result)


@router.get("/{imdb_id}", summary="Look up a title by IMDb id")
def get_movie(
    imdb_id: str,
    session: Session = Depends(get_session),
    movie_service: MovieCacheService = Depends(get_movie_cache_service),
) -> dict[str, Any]:
    key = imdb_id.strip()
    if not key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="IMDb id must not be empty",
        )

    try:
        detail = movie_service.get_by_id(session, imdb_id=key)
    except Exception:
        _logger.exception("movies.detail.failed", imdb_id=key)
        detail = None
    if detail is None or not detail.succeeded:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Movie not found",
        )
    return render_movie_detail(detail)
