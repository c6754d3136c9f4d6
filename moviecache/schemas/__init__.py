from moviecache.schemas.movies import (
    RESPONSE_FALSE,
    RESPONSE_TRUE,
    MovieDetail,
    MovieSearchItem,
    MovieSearchResponse,
    parse_movie_detail,
    parse_search_response,
    render_movie_detail,
    render_search_response,
)

__all__ = [
    "RESPONSE_FALSE",
    "RESPONSE_TRUE",
    "MovieDetail",
    "MovieSearchItem",
    "MovieSearchResponse",
    "parse_movie_detail",
    "parse_search_response",
    "render_movie_detail",
    "render_search_response",
]
