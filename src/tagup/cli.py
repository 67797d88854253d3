"""Command-line access to tag upgrade suggestions.

Usage:
    tagup upgrade shop=convenience "name=Acme Riverside" --data-dir ./data
    tagup upgrade amenity=cafe name=Beanery --loc -0.12,51.5 --json
    tagup generic amenity=cafe name=Cafe
    tagup status
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from tagup.config import Settings
from tagup.service.lifecycle import SuggestionService


def _parse_tags(pairs: tuple[str, ...]) -> dict[str, str]:
    tags: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="TAGS")
        tags[key] = value
    return tags


def _parse_loc(value: str | None) -> tuple[float, float] | None:
    if value is None:
        return None
    try:
        lon, lat = (float(part) for part in value.split(","))
    except ValueError:
        raise click.BadParameter(f"expected LON,LAT, got '{value}'", param_hint="--loc")
    return lon, lat


def _format_tags(tags: dict[str, str]) -> str:
    """Format tags as aligned key = value lines."""
    width = max((len(k) for k in tags), default=0)
    return "\n".join(f"{k:<{width}} = {v}" for k, v in sorted(tags.items()))


def _load_service(ctx: click.Context) -> SuggestionService:
    settings: Settings = ctx.obj["settings"]
    service = SuggestionService.from_settings(settings)
    if asyncio.run(service.load()) != "ok":
        click.echo("Error: could not load the dataset", err=True)
        sys.exit(1)
    return service


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory with the dataset JSON files (default: $TAGUP_DATA_DIR, else download)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log load progress")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, verbose: bool) -> None:
    """Suggest canonical tags for map features."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = Settings.from_env()
    if data_dir is not None:
        settings = Settings(
            data_dir=data_dir,
            base_url=settings.base_url,
            settle_delay=settings.settle_delay,
            http_timeout=settings.http_timeout,
        )
    ctx.obj = {"settings": settings}


@main.command()
@click.argument("tags", nargs=-1, required=True)
@click.option("--loc", default=None, help="Feature location as LON,LAT")
@click.option("--json", "json_output", is_flag=True, help="Output JSON instead of formatted text")
@click.pass_context
def upgrade(ctx: click.Context, tags: tuple[str, ...], loc: str | None, json_output: bool) -> None:
    """Suggest upgraded tags for a feature.

    TAGS: The feature's tags as key=value pairs.
    """
    feature = _parse_tags(tags)
    location = _parse_loc(loc)
    service = _load_service(ctx)

    new_tags = service.upgrade(feature, location)

    if json_output:
        changed = new_tags is not None
        click.echo(json.dumps({"changed": changed, "tags": new_tags if changed else feature}, indent=2))
    elif new_tags is None:
        click.echo("No change.")
    else:
        click.echo(_format_tags(new_tags))


@main.command()
@click.argument("tags", nargs=-1, required=True)
@click.pass_context
def generic(ctx: click.Context, tags: tuple[str, ...]) -> None:
    """Check whether a feature's name is generic.

    TAGS: The feature's tags as key=value pairs.
    """
    feature = _parse_tags(tags)
    service = _load_service(ctx)

    if service.is_generic(feature):
        click.echo(f"'{feature.get('name', '')}' is a generic name")
    else:
        click.echo(f"'{feature.get('name', '')}' is not a generic name")


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Load the dataset and print index statistics."""
    service = _load_service(ctx)
    indices = service.raw_indices()
    click.echo(f"status       : {service.status()}")
    click.echo(f"categories   : {len(indices.data)}")
    click.echo(f"items        : {len(indices.item_by_id)}")
    click.echo(f"dissolved    : {len(indices.dissolved)}")
    click.echo(f"replacements : {len(indices.replacements)}")


if __name__ == "__main__":
    main()
