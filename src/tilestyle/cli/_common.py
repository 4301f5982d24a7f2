"""Helpers shared by CLI commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from tilestyle.ess import EssStyle, StyleFormatError, load_ess
from tilestyle.model.diagnostic import Diagnostic, Severity


def read_style(path: str) -> EssStyle:
    """Load an ESS file or exit with status 1 and a message."""
    try:
        return load_ess(Path(path))
    except UnicodeDecodeError as exc:
        click.echo(f"Not UTF-8 text: {path}: {exc}", err=True)
    except json.JSONDecodeError as exc:
        click.echo(f"Invalid JSON in {path}: {exc}", err=True)
    except StyleFormatError as exc:
        click.echo(f"Not a map style: {exc}", err=True)
    except OSError as exc:
        click.echo(f"Cannot read {path}: {exc}", err=True)
    sys.exit(1)


def summarize(diagnostics: list[Diagnostic]) -> str:
    errors = sum(1 for d in diagnostics if d.severity is Severity.ERROR)
    warnings = sum(1 for d in diagnostics if d.severity is Severity.WARNING)
    infos = sum(1 for d in diagnostics if d.severity is Severity.INFO)
    return f"{errors} error(s), {warnings} warning(s), {infos} info"
