"""CLI commands for ecological site descriptions."""

import json

import click
from rich.console import Console

from soilviz.esd.client import EcologicalSiteNotFoundError, EditClient, parse_ecoclass_id
from soilviz.esd.formatter import format_esd_for_farmers
from soilviz.logging_config import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


@click.group()
def esd() -> None:
    """Ecological site description commands (EDIT)."""
    pass


@esd.command()
@click.argument("ecoclassid")
@click.option(
    "--measurement-system",
    type=click.Choice(["usc", "metric"]),
    default="usc",
    help="Units for EDIT values",
)
@click.option("--raw", is_flag=True, help="Include the full EDIT payload in JSON output")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def describe(
    ecoclassid: str, measurement_system: str, raw: bool, output_format: str, verbose: bool
) -> None:
    """Farmer-friendly summary of an ecological site.

    ECOCLASSID: SSURGO ecological site id, e.g. R039XA011NM
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    client = EditClient()
    try:
        data = client.get_description(ecoclassid, measurement_system)
        summary = format_esd_for_farmers(data, client.asset_base_url)
    except EcologicalSiteNotFoundError as e:
        click.echo(str(e), err=True)
        raise click.Abort() from e
    except Exception as e:
        logger.error(f"Error fetching ecological site {ecoclassid}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        exclude = None if raw else {"raw_data"}
        click.echo(json.dumps(summary.model_dump(mode="json", exclude=exclude), indent=2))
        return

    info = summary.basic_info
    land = summary.land_characteristics
    console.print(f"[bold]{info.site_name}[/bold]")
    console.print(f"{info.location}")
    console.print(f"\n{info.key_message}")
    console.print(f"Suitability: {info.suitability}\n")
    for label, value in (
        ("Terrain", land.terrain),
        ("Landforms", land.landforms),
        ("Soils", land.soils),
        ("Climate", land.climate),
        ("Elevation", land.elevation),
        ("Slopes", land.slopes),
        ("Vegetation", summary.productivity.dominant_vegetation),
    ):
        console.print(f"[bold]{label}:[/bold] {value}")

    for label, items in (
        ("Best uses", summary.productivity.best_uses),
        ("Limitations", summary.productivity.limitations),
        ("Opportunities", summary.management.opportunities),
        ("Challenges", summary.management.challenges),
        ("Management", summary.management.considerations),
    ):
        if items:
            console.print(f"\n[bold]{label}[/bold]")
            for item in items:
                console.print(f"  - {item}")


@esd.command()
@click.argument("ecoclassid")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def overview(ecoclassid: str, verbose: bool) -> None:
    """Raw EDIT overview document for an ecological site (JSON)."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        data = EditClient().get_overview(ecoclassid)
    except Exception as e:
        logger.error(f"Error fetching overview for {ecoclassid}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    click.echo(json.dumps(data, indent=2))


@esd.command(name="parse-id")
@click.argument("ecoclassid")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
def parse_id(ecoclassid: str, output_format: str) -> None:
    """Split an ecological site id into catalog, geo unit and ecoclass."""
    parsed = parse_ecoclass_id(ecoclassid)
    if parsed is None:
        click.echo(f"Error: invalid ecoclassid format: {ecoclassid}", err=True)
        raise click.Abort()

    if output_format == "json":
        click.echo(json.dumps(parsed.model_dump(), indent=2))
    else:
        console.print(f"Catalog: {parsed.catalog}")
        console.print(f"Geo unit: {parsed.geo_unit}")
        console.print(f"Ecoclass: {parsed.ecoclass}")
