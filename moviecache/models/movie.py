from enum import StrEnum

from sqlalchemy import Column, Enum, Text
from sqlmodel import Field, SQLModel

from moviecache.models.base import TimestampMixin

YEAR_UNKNOWN = "N/A"


class MediaType(StrEnum):
    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"


class Movie(TimestampMixin, SQLModel, table=True):
    """A title known to OMDb, keyed by its IMDb identifier.

    Rows created from search results carry only the summary columns; the
    detail bundle stays ``NULL`` until a lookup by id has been cached.
    """

    __tablename__ = "movies"

    imdb_id: str = Field(primary_key=True, max_length=20)
    title: str = Field(nullable=False, max_length=512)
    year: str = Field(default=YEAR_UNKNOWN, nullable=False, max_length=32)
    media_type: MediaType | None = Field(
        default=None,
        sa_column=Column(
            Enum(
                MediaType,
                native_enum=False,
                length=20,
                values_callable=lambda enum_cls: [member.value for member in enum_cls],
                validate_strings=True,
            ),
            nullable=True,
        ),
    )
    poster: str = Field(default="", nullable=False, max_length=1024)

    plot: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    director: str | None = Field(default=None, max_length=512)
    actors: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    runtime: str | None = Field(default=None, max_length=64)
    genre: str | None = Field(default=None, max_length=255)
    imdb_rating: str | None = Field(default=None, max_length=16)

    @property
    def has_details(self) -> bool:
        return self.plot is not None
