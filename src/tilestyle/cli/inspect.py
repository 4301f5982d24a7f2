"""CLI command: tilestyle inspect -- show how each layer of a map style translates."""

from __future__ import annotations

import click

from tilestyle.cli._common import read_style, summarize
from tilestyle.diagnostics import CollectingSink
from tilestyle.ess import StyleTranslator
from tilestyle.parser.filter_text import format_filters


@click.command()
@click.argument("style", type=click.Path(exists=True, dir_okay=False))
def inspect(style: str) -> None:
    """Parse a JSON map style and display the outcome for every layer.

    Shows style metadata, each layer with the rule it became (or why it was
    skipped), and a diagnostic summary.
    """
    ess = read_style(style)
    sink = CollectingSink()
    translator = StyleTranslator(sink=sink)
    translated = translator.translate(ess)
    diagnostics = list(translator.diagnostics)

    # Style info
    click.echo(f"Style:      {ess.name or ess.id}")
    click.echo(f"Version:    {ess.version}")
    click.echo(f"Sources:    {len(ess.sources)}")
    click.echo(f"Layers:     {len(ess.layers)}")
    click.echo(f"Rules:      {len(translated.rules)}")
    click.echo(f"Background: {translated.background.to_css()}")
    click.echo()

    if not ess.is_supported_version:
        for diag in sink.diagnostics:
            click.echo(str(diag))
        return

    # Layers
    click.echo("Layers:")
    for layer in ess.layers:
        parts = [f"  {layer.id}", f"type={layer.type}"]
        if layer.source_layer:
            parts.append(f"source-layer={layer.source_layer}")
        sink.clear()
        rule = translator.translate_layer(layer)
        if rule is None:
            parts.append("-> skipped")
        else:
            parts.append(f"-> {rule.symbol.kind}")
            if rule.properties:
                parts.append(f"[{format_filters(rule.properties)}]")
        click.echo("  ".join(parts))
        for diag in sink.diagnostics:
            click.echo(f"      {diag.severity.value.lower()}: {diag.message}")
    click.echo()

    click.echo(f"Summary: {summarize(diagnostics)}")
