"""Command line interface for the Animap API."""
from __future__ import annotations

import json
from typing import Any

import httpx
import typer

from .client import create_client


DEFAULT_API_BASE = "http://localhost:8000"

app = typer.Typer(help="Resolve AniList ids and fetch catalog episode lists via the Animap API.")
mappings_app = typer.Typer(help="Inspect resolved id mappings.")
app.add_typer(mappings_app, name="mappings")


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL for the Animap API service.",
        show_default=True,
        envvar="ANIMAP_API_BASE",
    )


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def resolve(
    external_id: int = typer.Argument(..., min=1, help="AniList id to resolve."),
    api_base: str = _api_base_option(),
) -> None:
    """Map an AniList id onto a catalog id."""

    with create_client(api_base) as client:
        response = client.get(f"/resolve/{external_id}")
        if response.status_code == 404:
            typer.echo(response.json().get("detail", "Not found"), err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def episodes(
    identifier: str = typer.Argument(..., help="AniList id (digits) or catalog id."),
    summary: bool = typer.Option(
        False,
        "--summary/--no-summary",
        help="Print one line per episode instead of JSON.",
        show_default=True,
    ),
    api_base: str = _api_base_option(),
) -> None:
    """Fetch the episode list for an AniList id or catalog id."""

    with create_client(api_base) as client:
        try:
            response = client.get(f"/episodes/{identifier}")
        except httpx.HTTPError as exc:  # pragma: no cover - network error path
            typer.echo(f"Failed to contact Animap API: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    payload = response.json()
    results = payload.get("results") or {}
    if not payload.get("success") or not results.get("success"):
        typer.echo(results.get("message") or "Lookup failed", err=True)
        raise typer.Exit(code=1)

    if not summary:
        _echo_json(payload)
        return

    typer.echo(
        f"{results.get('internalId')} (AniList {results.get('externalId') or '-'}): "
        f"{results.get('totalEpisodes', 0)} episodes"
    )
    for episode in results.get("episodes") or []:
        marker = " [filler]" if episode.get("isFiller") else ""
        title = episode.get("displayTitle") or ""
        typer.echo(f"{episode['episodeNumber']:>4}  {title}{marker}")


@mappings_app.command("cache")
def cache_snapshot(api_base: str = _api_base_option()) -> None:
    """Show mappings resolved by search since the service started."""

    with create_client(api_base) as client:
        response = client.get("/mappings/cache")
        response.raise_for_status()
        _echo_json(response.json())
