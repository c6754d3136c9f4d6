from __future__ import annotations

from collections.abc import Generator

from sqlmodel import Session, create_engine

from moviecache.core.config import settings
from moviecache.models import ensure_model_mappings

engine = create_engine(settings.database_uri, echo=settings.debug)


def get_session() -> Generator[Session, None, None]:
    ensure_model_mappings()
    with Session(engine) as session:
        yield session
