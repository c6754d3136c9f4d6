from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated

import typer
from sqlmodel import Session, SQLModel

from moviecache.core.database import engine
from moviecache.models import ensure_model_mappings
from moviecache.services.health import collect_resource_counts
from moviecache.services.movie_cache import get_movie_cache_service
from moviecache.services.search_cache import prune_negative_searches

app = typer.Typer(add_completion=False)


@app.command("init-db")
def init_db() -> None:
    """Create the cache tables directly from the model metadata."""
    ensure_model_mappings()
    SQLModel.metadata.create_all(engine)
    typer.echo("Database tables created")


@app.command()
def search(
    text: str = typer.Argument(..., help="Free-text search term"),
) -> None:
    """Run a cache-aside search and print the matching titles."""

    query = text.strip()
    if not query:
        typer.echo("Search text must not be empty.")
        raise typer.Exit(code=1)

    with Session(engine) as session:
        result = get_movie_cache_service().search(session, query=query)

    if not result.succeeded:
        message = result.error or "No results"
        typer.echo(f"No results for {query!r}: {message}")
        raise typer.Exit(code=1)

    items = result.search or []
    typer.echo(f"{len(items)} of {result.total_results or '?'} results for {query!r}:")
    for item in items:
        media = item.media_type.value if item.media_type else "-"
        typer.echo(f"  {item.imdb_id}  {item.title} ({item.year}) [{media}]")


@app.command()
def lookup(
    imdb_id: str = typer.Argument(..., help="IMDb identifier, e.g. tt0372784"),
) -> None:
    """Look up one title by IMDb id, filling the cache on a miss."""

    key = imdb_id.strip()
    if not key:
        typer.echo("IMDb id must not be empty.")
        raise typer.Exit(code=1)

    with Session(engine) as session:
        detail = get_movie_cache_service().get_by_id(session, imdb_id=key)

    if detail is None:
        typer.echo(f"Movie not found: {key}")
        raise typer.Exit(code=1)

    typer.echo(f"{detail.title} ({detail.year})")
    typer.echo(f"  Director: {detail.director or '-'}")
    typer.echo(f"  Actors: {detail.actors or '-'}")
    typer.echo(f"  Runtime: {detail.runtime or '-'}")
    typer.echo(f"  Genre: {detail.genre or '-'}")
    typer.echo(f"  Rating: {detail.imdb_rating or '-'}")
    if detail.plot:
        typer.echo(f"  Plot: {detail.plot}")


@app.command("prune-negative-searches")
def prune_negative_searches_cmd(
    older_than_days: Annotated[
        int | None,
        typer.Option(
            "--older-than-days",
            min=1,
            help="Prune negative entries created on or before now minus the provided days.",
            show_default=False,
        ),
    ] = None,
    before: Annotated[
        str | None,
        typer.Option(
            "--before",
            help="Prune negative entries created on or before the ISO timestamp (UTC if no timezone).",
            show_default=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Preview deletions without removing entries."),
    ] = False,
) -> None:
    """Remove cached "no results" searches so they are fetched again."""

    if older_than_days is not None and before is not None:
        typer.echo("Provide either --older-than-days or --before, not both.")
        raise typer.Exit(code=1)

    cutoff = None
    if before is not None:
        try:
            parsed = datetime.fromisoformat(before)
        except ValueError:
            typer.echo(
                "Invalid ISO timestamp for --before; expected YYYY-MM-DDTHH:MM:SS[±HH:MM]."
            )
            raise typer.Exit(code=1) from None
        cutoff = (
            parsed.replace(tzinfo=UTC)
            if parsed.tzinfo is None
            else parsed.astimezone(UTC)
        )
    elif older_than_days is not None:
        cutoff = datetime.now(UTC) - timedelta(days=older_than_days)

    with Session(engine) as session:
        removed, threshold = prune_negative_searches(
            session, before=cutoff, dry_run=dry_run
        )

    threshold_display = threshold.astimezone(UTC).isoformat()
    entry_word = "entry" if removed == 1 else "entries"

    if dry_run:
        typer.echo(
            f"Would remove {removed} negative search {entry_word} created on or before {threshold_display}."
        )
        if removed:
            typer.echo("Re-run without --dry-run to delete them.")
        return

    typer.echo(
        f"Removed {removed} negative search {entry_word} created on or before {threshold_display}."
    )


@app.command("cache-stats")
def cache_stats() -> None:
    """Print row counts for the cache tables."""
    with Session(engine) as session:
        counts = collect_resource_counts(session)
    for name, value in counts.items():
        typer.echo(f"{name}: {value}")


if __name__ == "__main__":
    app()
