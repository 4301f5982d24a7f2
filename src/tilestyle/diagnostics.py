"""Pluggable sinks for import and editing diagnostics."""

from __future__ import annotations

import logging
from typing import Callable

from tilestyle.model.diagnostic import Diagnostic

__all__ = ["DiagnosticSink", "CollectingSink", "logging_sink", "fan_out"]

DiagnosticSink = Callable[[Diagnostic], None]


def logging_sink(logger: logging.Logger | None = None) -> DiagnosticSink:
    """Create a sink that writes each diagnostic to *logger* at its severity's level."""
    log = logger or logging.getLogger("tilestyle")

    def sink(diagnostic: Diagnostic) -> None:
        log.log(
            diagnostic.severity.log_level,
            "%s: %s",
            diagnostic.code,
            diagnostic,
        )

    return sink


class CollectingSink:
    """Sink that keeps every diagnostic it receives, in order."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]

    def clear(self) -> None:
        self.diagnostics.clear()


def fan_out(*sinks: DiagnosticSink) -> DiagnosticSink:
    """Combine several sinks into one; each receives every diagnostic."""

    def sink(diagnostic: Diagnostic) -> None:
        for target in sinks:
            target(diagnostic)

    return sink
