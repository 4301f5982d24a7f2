"""tilestyle CLI entry point: Click group with subcommands."""

import logging

import click

from tilestyle import __version__


@click.group()
@click.version_option(version=__version__, prog_name="tilestyle")
@click.option("-v", "--verbose", is_flag=True, help="Log translation details to stderr")
def cli(verbose: bool) -> None:
    """tilestyle - import JSON map styles and inspect vector tile style rules."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from tilestyle.cli.convert import convert  # noqa: E402
from tilestyle.cli.filters import filter_text  # noqa: E402
from tilestyle.cli.inspect import inspect  # noqa: E402

cli.add_command(convert)
cli.add_command(inspect)
cli.add_command(filter_text)
