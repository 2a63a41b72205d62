"""CLI commands for soil property classification."""

import json

import click
from rich.console import Console
from rich.table import Table

from soilviz.logging_config import get_logger, setup_logging
from soilviz.properties import (
    calculate_soil_quality,
    classify_property,
    format_property_value,
    generate_property_legend,
    get_property_status,
    list_properties,
)

console = Console()
logger = get_logger(__name__)

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
VERBOSE_OPTION = click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")


def _check_property(prop: str) -> None:
    known = list_properties()
    if prop not in known:
        click.echo(f"Error: unknown property '{prop}' (choose from {', '.join(known)})", err=True)
        raise click.Abort()


@click.group(name="property")
def property_cli() -> None:
    """Classify horizon properties (clay, om, ph, awc, ksat)."""
    pass


@property_cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("prop", metavar="PROPERTY")
@click.argument("value", type=float)
@FORMAT_OPTION
@VERBOSE_OPTION
def classify(prop: str, value: float, output_format: str, verbose: bool) -> None:
    """Place a value in its property class."""
    setup_logging(level="DEBUG" if verbose else "INFO")
    _check_property(prop)
    classification = classify_property(value, prop)
    status = get_property_status(value, prop)

    if output_format == "json":
        data = {
            "property": prop,
            "value": value,
            "status": status,
            "classification": classification.model_dump() if classification else None,
        }
        click.echo(json.dumps(data, indent=2))
        return

    console.print(f"{format_property_value(value, prop)}: [bold]{classification.label}[/bold]")
    console.print(classification.description)
    if classification.outlier:
        console.print(f"[yellow]Value is {classification.outlier} outside the classified range[/yellow]")
    console.print(f"Status: {status}")


@property_cli.command()
@click.argument("values", nargs=-1, required=True)
@FORMAT_OPTION
@VERBOSE_OPTION
def quality(values: tuple[str, ...], output_format: str, verbose: bool) -> None:
    """Overall soil quality score from PROPERTY=VALUE pairs.

    Example: soilviz property quality ph=6.5 om=3.2 clay=22
    """
    setup_logging(level="DEBUG" if verbose else "INFO")
    properties: dict[str, float] = {}
    for pair in values:
        key, sep, raw = pair.partition("=")
        try:
            if not sep:
                raise ValueError(f"expected PROPERTY=VALUE, got '{pair}'")
            properties[key.strip()] = float(raw)
        except ValueError as e:
            logger.error(f"Invalid property value: {e}")
            click.echo(f"Error: {e}", err=True)
            raise click.Abort() from e

    result = calculate_soil_quality(properties)

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    table = Table(title=f"Soil quality: {result.overall_score}/100")
    table.add_column("Property")
    table.add_column("Value", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for prop, score in result.property_scores.items():
        table.add_row(prop, format_property_value(score.value, prop), f"{score.score:.0f}", score.status)
    console.print(table)


@property_cli.command()
@click.argument("prop", metavar="PROPERTY")
@FORMAT_OPTION
@VERBOSE_OPTION
def legend(prop: str, output_format: str, verbose: bool) -> None:
    """Map legend for a property."""
    setup_logging(level="DEBUG" if verbose else "INFO")
    _check_property(prop)
    entries = generate_property_legend(prop)

    if output_format == "json":
        click.echo(json.dumps([e.model_dump() for e in entries], indent=2))
        return

    table = Table(title=prop)
    table.add_column("Range")
    table.add_column("Class")
    table.add_column("Color")
    for e in entries:
        table.add_row(e.display_label, e.full_label, f"[{e.color}]■[/] {e.color}")
    console.print(table)
