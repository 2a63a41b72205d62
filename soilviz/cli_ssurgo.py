"""CLI commands for SSURGO map units and land capability."""

import json

import click
from rich.console import Console
from rich.table import Table

from soilviz.lcc.formatter import format_lcc_data
from soilviz.logging_config import get_logger, setup_logging
from soilviz.ssurgo.models import MapUnit
from soilviz.ssurgo.sda import SoilDataAccessClient

console = Console()
logger = get_logger(__name__)

# Negative longitudes must not be mistaken for options
POINT_SETTINGS = {"ignore_unknown_options": True}


def _fmt(value, digits: int = 1) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.{digits}f}"
    return str(value)


def _lookup_map_unit(latitude: float, longitude: float) -> MapUnit:
    try:
        map_unit = SoilDataAccessClient().query_map_unit(latitude, longitude)
    except Exception as e:
        logger.error(f"Error querying SSURGO: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if map_unit is None:
        click.echo(f"No SSURGO map unit found at ({latitude}, {longitude})", err=True)
        raise click.Abort()
    return map_unit


@click.group()
def ssurgo() -> None:
    """SSURGO soil survey commands (USDA NRCS Soil Data Access)."""
    pass


@ssurgo.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def lookup(latitude: float, longitude: float, output_format: str, verbose: bool) -> None:
    """Map unit, components and horizons at a location.

    LATITUDE: Latitude in decimal degrees
    LONGITUDE: Longitude in decimal degrees
    """
    setup_logging(level="DEBUG" if verbose else "INFO")
    map_unit = _lookup_map_unit(latitude, longitude)

    if output_format == "json":
        click.echo(json.dumps(map_unit.model_dump(mode="json"), indent=2))
        return

    console.print(f"[bold]{map_unit.muname}[/bold] ({map_unit.musym}, mukey {map_unit.mukey})")
    console.print(f"Survey area: {map_unit.areaname} ({map_unit.areasymbol})")

    table = Table(title="Components")
    for column in ("Component", "%", "Major", "Slope", "Drainage", "Hydric", "Eco site"):
        table.add_column(column)
    for c in map_unit.components:
        table.add_row(
            c.compname or "",
            _fmt(c.comppct_r, 0),
            "yes" if c.is_major else "",
            _fmt(c.slope_r),
            c.drainagecl or "",
            c.hydricrating or "",
            c.ecoclassid or "",
        )
    console.print(table)

    dominant = map_unit.dominant_component()
    if dominant and dominant.horizons:
        hz = Table(title=f"Horizons: {dominant.compname}")
        for column in ("Horizon", "Depth (cm)", "Sand", "Silt", "Clay", "OM", "pH", "AWC", "Ksat"):
            hz.add_column(column)
        for h in dominant.horizons:
            hz.add_row(
                h.hzname or "",
                f"{_fmt(h.hzdept_r, 0)}-{_fmt(h.hzdepb_r, 0)}",
                _fmt(h.sandtotal_r),
                _fmt(h.silttotal_r),
                _fmt(h.claytotal_r),
                _fmt(h.om_r, 2),
                _fmt(h.ph1to1h2o_r),
                _fmt(h.awc_r, 2),
                _fmt(h.ksat_r, 2),
            )
        console.print(hz)


@ssurgo.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def lcc(latitude: float, longitude: float, output_format: str, verbose: bool) -> None:
    """Land capability classification report for a location."""
    setup_logging(level="DEBUG" if verbose else "INFO")
    map_unit = _lookup_map_unit(latitude, longitude)
    report = format_lcc_data(map_unit.components)

    if output_format == "json":
        click.echo(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))
        return

    for label, rating, description, limitations, management in (
        (
            "Non-irrigated",
            report.dominant_lcc.nonirrigated,
            report.nonirrigated_description,
            report.nonirrigated_limitations,
            report.nonirrigated_management,
        ),
        (
            "Irrigated",
            report.dominant_lcc.irrigated,
            report.irrigated_description,
            report.irrigated_limitations,
            report.irrigated_management,
        ),
    ):
        heading = f"{rating.lcc_class}{rating.subclass}" if rating else "not rated"
        console.print(f"\n[bold]{label}: Class {heading}[/bold]")
        console.print(f"{description.summary}. {description.description}")
        for limitation in limitations:
            console.print(f"  - {limitation.description} ({limitation.severity.value})")
        if management.suitable_crops:
            console.print(f"  Suitable crops: {', '.join(management.suitable_crops)}")
        for consideration in management.key_considerations:
            console.print(f"  * {consideration}")


@ssurgo.command(context_settings=POINT_SETTINGS)
@click.argument("latitude", type=float)
@click.argument("longitude", type=float)
@click.option("--component", help="Only show this component (by name)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def interpretations(
    latitude: float,
    longitude: float,
    component: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Interpretation ratings (suitabilities and limitations) at a location."""
    setup_logging(level="DEBUG" if verbose else "INFO")
    map_unit = _lookup_map_unit(latitude, longitude)

    components = [
        c
        for c in map_unit.components
        if component is None or (c.compname or "").lower() == component.lower()
    ]

    if output_format == "json":
        data = {
            c.cokey: {
                "component": c.compname,
                "interpretations": [i.model_dump(mode="json") for i in c.interpretations],
            }
            for c in components
        }
        click.echo(json.dumps(data, indent=2))
        return

    for c in components:
        table = Table(title=f"{c.compname} ({_fmt(c.comppct_r, 0)}%)")
        table.add_column("Interpretation")
        table.add_column("Rating")
        table.add_column("Value", justify="right")
        for i in c.interpretations:
            table.add_row(i.name or "", i.rating or "", f"{i.value:.2f}")
        console.print(table)
