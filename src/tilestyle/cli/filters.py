"""CLI command: tilestyle filter -- check editor filter text."""

from __future__ import annotations

import sys

import click

from tilestyle.parser import FilterParseError, format_filters, parse_filter_text


@click.command("filter")
@click.argument("text")
def filter_text(text: str) -> None:
    """Parse editor filter TEXT and print its canonical form.

    Exits with code 1 if the text cannot be parsed.
    """
    try:
        filters = parse_filter_text(text)
    except FilterParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    click.echo(format_filters(filters))
    for f in filters:
        click.echo(f"  {f.property_name}: {f.operator.op.name} {f.operator.value!r}")
