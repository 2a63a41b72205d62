"""CLI commands for the Cropland Data Layer."""

import json

import click
from rich.console import Console
from rich.table import Table

from soilviz.cdl.query import CDLClient, query_cdl_history, query_cdl_point
from soilviz.cdl.stac import CDLStacClient, get_cdl_legend
from soilviz.geo import parse_bbox
from soilviz.logging_config import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

POINT_SETTINGS = {"ignore_unknown_options": True}


@click.group()
def cdl() -> None:
    """Cropland Data Layer commands (USDA NASS CropScape)."""
    pass


@cdl.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option("--year", type=int, default=2023, show_default=True, help="CDL year")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def value(latitude: float, longitude: float, year: int, output_format: str, verbose: bool) -> None:
    """Crop classification at a location for one year."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        result = query_cdl_point(latitude, longitude, year)
    except Exception as e:
        logger.error(f"Error querying CDL: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if result is None:
        click.echo(f"No CDL data for {year} at ({latitude}, {longitude})", err=True)
        raise click.Abort()

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        console.print(
            f"{result.year}: [bold]{result.crop_name}[/bold] (code {result.crop_code}, "
            f"{result.crop_type}, ~{result.confidence}% confidence)"
        )


@cdl.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option("--start-year", type=int, help="First year (default: earliest available)")
@click.option("--end-year", type=int, help="Last year (default: latest available)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def history(
    latitude: float,
    longitude: float,
    start_year: int | None,
    end_year: int | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Crop history at a location with transition warnings."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    client = CDLClient()
    years = [
        y
        for y in client.years
        if (start_year is None or y >= start_year) and (end_year is None or y <= end_year)
    ]
    if not years:
        click.echo("Error: no CDL years in the requested range", err=True)
        raise click.Abort()

    try:
        results = query_cdl_history(latitude, longitude, years, client)
    except Exception as e:
        logger.error(f"Error querying CDL history: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
        return

    table = Table(title=f"Crop history at ({latitude}, {longitude})")
    for column in ("Year", "Crop", "Type", "Confidence", "Warning"):
        table.add_column(column)
    for r in results:
        table.add_row(
            str(r.year),
            f"[{r.color}]■[/] {r.crop_name}",
            r.crop_type or "",
            f"{r.confidence}%" if r.confidence is not None else "",
            r.transition_warning or "",
        )
    console.print(table)


@cdl.command()
@click.argument("bbox")
@click.option("--year", type=int, default=2023, show_default=True, help="CDL year")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def stac(bbox: str, year: int, output_format: str, verbose: bool) -> None:
    """CDL items and tile URL for a bounding box.

    BBOX: west,south,east,north in decimal degrees
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        box = list(parse_bbox(bbox))
        client = CDLStacClient()
        items = client.search_items(box, year)
        tile_url = client.get_cdl_tile_url(year, box)
    except Exception as e:
        logger.error(f"Error searching CDL STAC items: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        data = {
            "year": year,
            "bbox": box,
            "items": [i.model_dump(mode="json") for i in items],
            "tile_url": tile_url,
        }
        click.echo(json.dumps(data, indent=2))
        return

    console.print(f"Found {len(items)} CDL items for {year}")
    for item in items:
        console.print(f"  - {item.id}")
    console.print(f"Tile URL: {tile_url}")


@cdl.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
def legend(output_format: str) -> None:
    """Legend for the most common CDL classes."""
    entries = get_cdl_legend()
    if output_format == "json":
        click.echo(json.dumps([e.model_dump() for e in entries], indent=2))
        return

    table = Table(title="Cropland Data Layer")
    table.add_column("Code", justify="right")
    table.add_column("Class")
    table.add_column("Color")
    for e in entries:
        table.add_row(str(e.value), e.label, f"[{e.color}]■[/] {e.color}")
    console.print(table)
