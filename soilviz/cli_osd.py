"""CLI commands for Official Series Descriptions."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from soilviz.config import get_settings
from soilviz.logging_config import get_logger, setup_logging
from soilviz.osd.descriptions import (
    DEFAULT_CHECK_SERIES,
    OSDDescriptionStore,
    build_descriptions,
    check_descriptions,
    load_database,
)
from soilviz.osd.narrative import parse_osd_text
from soilviz.osd.parser import parse_osd
from soilviz.osd.series_api import SoilSeriesClient

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


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str, ensure_ascii=False))


@click.group()
def osd() -> None:
    """Official Series Description commands."""
    pass


@osd.command(name="build-descriptions")
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@FORMAT_OPTION
@VERBOSE_OPTION
def build_descriptions_cmd(
    source_dir: Path, output: Path, output_format: str, verbose: bool
) -> None:
    """Convert a directory of OSD text files into the description database.

    SOURCE_DIR: Directory with one subdirectory of OSD files per letter
    OUTPUT: JSON file to write
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        report = build_descriptions(source_dir, output)
    except Exception as e:
        logger.error(f"Error building OSD descriptions: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        _echo_json(report.model_dump(mode="json"))
        return

    console.print(f"[green]Wrote {report.entries} descriptions to {report.output_file}[/green]")
    console.print(
        f"Processed {report.processed} files in {report.subdirectories} "
        f"subdirectories, {report.errors} errors"
    )
    for series, sample in report.samples.items():
        console.print(f"\n[bold]{series}[/bold]: {sample}...")


@osd.command(name="check-descriptions")
@click.argument("db", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--series",
    "series_names",
    multiple=True,
    help="Series to check (repeatable; default: a fixed sample)",
)
@click.option("--all", "check_all", is_flag=True, help="Check every series in the database")
@FORMAT_OPTION
@VERBOSE_OPTION
def check_descriptions_cmd(
    db: Path,
    series_names: tuple[str, ...],
    check_all: bool,
    output_format: str,
    verbose: bool,
) -> None:
    """Report raw OSD headings left in generated descriptions.

    Exits with status 1 when any checked series is missing or unclean.
    """
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        database = load_database(db)
    except Exception as e:
        logger.error(f"Error loading description database: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    series = None if check_all else list(series_names or DEFAULT_CHECK_SERIES)
    findings = check_descriptions(database, series)

    if output_format == "json":
        _echo_json(findings)
    else:
        table = Table(title="Description check")
        table.add_column("Series")
        table.add_column("Status")
        for name, problems in findings.items():
            status = "[green]clean[/green]" if not problems else f"[red]{', '.join(problems)}[/red]"
            table.add_row(name, status)
        console.print(table)

    if any(findings.values()):
        sys.exit(1)


@osd.command()
@click.argument("series")
@click.option(
    "--db",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Description database (default: SOILVIZ_OSD_DESCRIPTIONS)",
)
@FORMAT_OPTION
@VERBOSE_OPTION
def describe(series: str, db: Path | None, output_format: str, verbose: bool) -> None:
    """Show the generated narrative for a soil series."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    path = db or get_settings().osd_descriptions_path
    if path is None:
        click.echo("Error: no description database given (use --db)", err=True)
        raise click.Abort()

    try:
        entry = OSDDescriptionStore(path).get_description(series)
    except Exception as e:
        logger.error(f"Error reading description database: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if entry is None:
        click.echo(f"No description for series {series.upper()}", err=True)
        raise click.Abort()

    if output_format == "json":
        _echo_json(entry.model_dump(mode="json", by_alias=True))
        return

    console.print(f"[bold]{entry.series}[/bold]  (updated {entry.last_updated})\n")
    console.print(entry.description)
    if entry.range_characteristics:
        table = Table(title="Key characteristics")
        table.add_column("Property")
        table.add_column("Range")
        table.add_column("Why it matters")
        for rc in entry.range_characteristics:
            table.add_row(rc.property, rc.value, rc.importance)
        console.print(table)


@osd.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@FORMAT_OPTION
@VERBOSE_OPTION
def parse(file: Path, output_format: str, verbose: bool) -> None:
    """Structured parse of one OSD text file."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        record = parse_osd(file.read_text(encoding="utf-8"))
    except Exception as e:
        logger.error(f"Error parsing {file}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if record is None:
        click.echo(f"Error: could not parse {file}", err=True)
        raise click.Abort()

    if output_format == "json":
        _echo_json(record.model_dump(mode="json", by_alias=True))
        return

    console.print(f"[bold]{record.series_name}[/bold] ({record.state})")
    console.print(f"Taxonomic class: {record.taxonomic_class}")
    if record.drainage.drainage_class:
        console.print(f"Drainage: {record.drainage.drainage_class}")

    table = Table(title="Typical pedon")
    for column in ("Horizon", "Depth", "Texture", "Moist color", "pH", "Reaction"):
        table.add_column(column)
    for h in record.typical_pedon.horizons:
        table.add_row(
            h.name,
            h.depth,
            h.texture,
            h.color.moist or "",
            "" if h.ph is None else str(h.ph),
            h.reaction,
        )
    console.print(table)


@osd.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--series", "series_name", help="Series name (default: file name)")
@FORMAT_OPTION
@VERBOSE_OPTION
def narrative(file: Path, series_name: str | None, output_format: str, verbose: bool) -> None:
    """Farmer-friendly narrative for one OSD text file."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        result = parse_osd_text(file.read_text(encoding="utf-8"), series_name or file.stem)
    except Exception as e:
        logger.error(f"Error building narrative for {file}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        _echo_json(result.model_dump(mode="json"))
    else:
        console.print(f"[bold]{result.series_name}[/bold]\n")
        console.print(result.full_description)


@osd.command()
@click.argument("name")
@FORMAT_OPTION
@VERBOSE_OPTION
def series(name: str, output_format: str, verbose: bool) -> None:
    """Query the UC Davis SoilWeb soil-series API."""
    setup_logging(level="DEBUG" if verbose else "INFO")

    try:
        formatted = SoilSeriesClient().get_formatted(name)
    except Exception as e:
        logger.error(f"Error querying series {name}: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if formatted is None:
        click.echo(f"No series data for {name.upper()}", err=True)
        raise click.Abort()

    if output_format == "json":
        _echo_json(formatted.model_dump(mode="json"))
        return

    c = formatted.classification
    console.print(f"[bold]{formatted.series_name}[/bold]")
    console.print(f"Family: {c.family or 'unknown'}")
    console.print(f"Order: {c.order or 'unknown'}  Drainage: {formatted.properties.drainage or 'unknown'}")
    if formatted.extent.acres:
        console.print(f"Extent: {formatted.extent.acres:,.0f} acres")

    table = Table(title="Horizons")
    for column in ("Horizon", "Depth", "Texture", "Moist color", "pH"):
        table.add_column(column)
    for h in formatted.horizons:
        table.add_row(
            h.name or "",
            h.depth,
            h.texture or "",
            h.color.moist or "",
            "" if h.ph is None else str(h.ph),
        )
    console.print(table)
