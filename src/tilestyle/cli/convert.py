"""CLI command: tilestyle convert -- translate a JSON map style to style rules."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from tilestyle.cli._common import read_style, summarize
from tilestyle.diagnostics import CollectingSink
from tilestyle.editor import StyleDoc
from tilestyle.ess import StyleTranslator


@click.command()
@click.argument("style", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the result here instead of stdout",
)
@click.option(
    "--document",
    is_flag=True,
    help="Write an editor document (rule rows with ids) instead of the bare style",
)
def convert(style: str, output: str | None, document: bool) -> None:
    """Translate a version 8 JSON map style into tilestyle rules.

    Diagnostics go to stderr. Exits with code 1 if the style could not be
    translated at all.
    """
    ess = read_style(style)

    sink = CollectingSink()
    translated = StyleTranslator(sink=sink).translate(ess)

    if document:
        data = StyleDoc(translated, sink=sink).to_dict()
    else:
        data = translated.to_dict()
    text = json.dumps(data, indent=2)

    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {len(translated.rules)} rule(s) to {output}", err=True)
    else:
        click.echo(text)

    for diag in sink.diagnostics:
        click.echo(str(diag), err=True)
    if sink.diagnostics:
        click.echo(f"Summary: {summarize(sink.diagnostics)}", err=True)

    if any(d.is_error for d in sink.diagnostics):
        sys.exit(1)
