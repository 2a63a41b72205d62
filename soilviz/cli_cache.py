"""HTTP cache maintenance commands."""

import json

import click
from rich.console import Console

from soilviz.http_cache import cache_stats, clear_cache

console = Console()


@click.group()
def cache() -> None:
    """HTTP response cache management."""
    pass


@cache.command()
@click.option(
    "--format", "output_format", type=click.Choice(["table", "json"]), default="table"
)
def stats(output_format: str) -> None:
    """Show cache statistics."""
    try:
        stats_data = cache_stats()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    if output_format == "json":
        click.echo(json.dumps(stats_data, indent=2))
        return

    console.print("[bold]HTTP Cache Statistics[/bold]")
    console.print(f"Backend: {stats_data['backend']}")
    console.print(f"Location: {stats_data['cache_name']}")
    console.print(f"Total entries: {stats_data['total_entries']}")
    console.print(f"Valid entries: {stats_data['valid_entries']}")
    console.print(f"Expired entries: {stats_data['expired_entries']}")


@cache.command()
@click.option("--expired", is_flag=True, help="Only remove expired entries")
@click.option("--confirm", is_flag=True, help="Skip confirmation prompt")
def clear(expired: bool, confirm: bool) -> None:
    """Clear cache entries."""
    message = "Clear expired cache entries" if expired else "Clear ALL cache entries"

    if not confirm and not click.confirm(f"{message}. Are you sure?"):
        console.print("Cancelled.")
        return

    deleted_count = clear_cache(expired_only=expired)
    console.print(f"[green]Deleted {deleted_count} cache entries[/green]")
