"""CLI commands for combined site reports."""

import csv
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from soilviz.logging_config import get_logger, setup_logging
from soilviz.models import SiteReport
from soilviz.service import SoilSurveyService

console = Console()
logger = get_logger(__name__)

POINT_SETTINGS = {"ignore_unknown_options": True}


@click.group()
def site() -> None:
    """Site reports combining SSURGO, land capability, ESD, OSD and CDL."""
    pass


@site.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option("--no-cdl", is_flag=True, help="Skip the crop history lookup")
@click.option("--no-esd", is_flag=True, help="Skip the ecological site lookup")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def report(
    latitude: float,
    longitude: float,
    no_cdl: bool,
    no_esd: bool,
    output_format: str,
    verbose: bool,
) -> None:
    """Soil report for a location.

    LATITUDE: Latitude in decimal degrees
    LONGITUDE: Longitude in decimal degrees
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        service = SoilSurveyService()
        result = service.site_report(
            latitude, longitude, include_cdl=not no_cdl, include_esd=not no_esd
        )
    except Exception as e:
        logger.error(f"Error building site report: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_report(result)


@site.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", type=click.Path(path_type=Path), help="Output file (default: stdout)"
)
@click.option("--lat-col", default="latitude", help="Column name for latitude")
@click.option("--lon-col", default="longitude", help="Column name for longitude")
@click.option("--no-cdl", is_flag=True, help="Skip the crop history lookup")
@click.option("--no-esd", is_flag=True, help="Skip the ecological site lookup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def batch(
    input_file: Path,
    output: Path | None,
    lat_col: str,
    lon_col: str,
    no_cdl: bool,
    no_esd: bool,
    verbose: bool,
) -> None:
    """Site reports for many locations from a CSV or JSON file (JSON output).

    INPUT_FILE: CSV or JSON file with location data
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        locations = load_locations(input_file, lat_col, lon_col)
        if not locations:
            click.echo("No valid locations found in input file", err=True)
            raise click.Abort()

        click.echo(f"Processing {len(locations)} locations...", err=True)
        results = SoilSurveyService().site_reports(
            locations, include_cdl=not no_cdl, include_esd=not no_esd
        )
    except click.Abort:
        raise
    except Exception as e:
        logger.error(f"Error in batch site reports: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    output_json = json.dumps(
        [r.model_dump(mode="json", by_alias=True) for r in results], indent=2
    )
    if output:
        output.write_text(output_json)
        click.echo(f"Results written to {output}", err=True)
    else:
        click.echo(output_json)

    successful = sum(1 for r in results if r.ok)
    click.echo(f"Summary: {successful}/{len(results)} locations without errors", err=True)


@site.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def providers(verbose: bool) -> None:
    """Show status of upstream data services."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        status = SoilSurveyService().get_provider_status()
    except Exception as e:
        logger.error(f"Error checking provider status: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    table = Table(title="Upstream services")
    table.add_column("Service")
    table.add_column("Available")
    table.add_column("Coverage")
    for info in status.values():
        available = "[green]yes[/green]" if info.available else "[red]no[/red]"
        coverage = info.coverage or f"[red]{info.error}[/red]"
        table.add_row(info.name, available, coverage)
    console.print(table)


def load_locations(input_file: Path, lat_col: str, lon_col: str) -> list[tuple[float, float]]:
    """Load ``(lat, lon)`` pairs from CSV or JSON; rows without numeric values are skipped."""
    if input_file.suffix.lower() == ".json":
        data = json.loads(input_file.read_text())
        rows = data if isinstance(data, list) else []
    else:
        with open(input_file, newline="") as f:
            rows = list(csv.DictReader(f))

    locations = []
    for row in rows:
        if not isinstance(row, dict) or lat_col not in row or lon_col not in row:
            continue
        try:
            locations.append((float(row[lat_col]), float(row[lon_col])))
        except (ValueError, TypeError):
            continue
    return locations


def _print_report(result: SiteReport) -> None:
    console.print(f"\n[bold]Soil report for {result.coordinates}[/bold]")
    console.print("=" * 60)

    mu = result.map_unit
    if mu:
        console.print(f"Map unit: {mu.muname} ({mu.musym}), {mu.areaname}")
        console.print(f"Dominant component: {result.dominant_component}")

    if result.lcc:
        for label, rating, description in (
            ("Non-irrigated", result.lcc.dominant_lcc.nonirrigated, result.lcc.nonirrigated_description),
            ("Irrigated", result.lcc.dominant_lcc.irrigated, result.lcc.irrigated_description),
        ):
            if rating:
                console.print(
                    f"{label} capability: Class {rating.lcc_class}{rating.subclass} "
                    f"({description.summary})"
                )

    if result.ecological_site:
        info = result.ecological_site.basic_info
        console.print(f"\n[bold]Ecological site:[/bold] {info.site_name}")
        console.print(info.key_message)

    if result.osd_description:
        console.print(f"\n[bold]Series {result.osd_description.series}[/bold]")
        console.print(result.osd_description.description)

    if result.cdl_history:
        table = Table(title="Crop history")
        table.add_column("Year")
        table.add_column("Crop")
        table.add_column("Warning")
        for r in result.cdl_history:
            table.add_row(str(r.year), r.crop_name, r.transition_warning or "")
        console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    for error in result.errors:
        console.print(f"[red]Error: {error}[/red]")
