"""Command-line interface for soilviz."""

import click

from soilviz import __version__
from soilviz.cli_cache import cache
from soilviz.cli_cdl import cdl
from soilviz.cli_esd import esd
from soilviz.cli_osd import osd
from soilviz.cli_property import property_cli
from soilviz.cli_site import site
from soilviz.cli_ssurgo import ssurgo


@click.group()
@click.version_option(__version__, prog_name="soilviz")
def main() -> None:
    """soilviz: US soil survey, ecological site and cropland data."""


main.add_command(osd, name="osd")
main.add_command(ssurgo, name="ssurgo")
main.add_command(esd, name="esd")
main.add_command(cdl, name="cdl")
main.add_command(site, name="site")
main.add_command(property_cli, name="property")
main.add_command(cache, name="cache")


if __name__ == "__main__":
    main()
