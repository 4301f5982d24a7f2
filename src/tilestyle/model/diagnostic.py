"""Findings reported while importing an ESS document or compiling editor rows.

Nothing in the import or edit path raises for content problems; each
skipped layer, dropped filter or hidden label becomes one
:class:`Diagnostic` handed to a sink instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, StrEnum


class Severity(Enum):
    """How much of the source survived into the translated style."""

    ERROR = "ERROR"  # nothing was translated
    WARNING = "WARNING"  # a layer or predicate was lost
    INFO = "INFO"  # translated, with an approximation

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


class DiagnosticCode(StrEnum):
    # ESS import
    UNSUPPORTED_VERSION = "unsupported_version"
    UNSUPPORTED_LAYER = "unsupported_layer"
    MISSING_PROPERTY = "missing_property"
    OPACITY_OVERWRITE = "opacity_overwrite"
    UNSUPPORTED_FILTER = "unsupported_filter"
    FILTER_PART_SKIPPED = "filter_part_skipped"
    # editor rows
    INVALID_SIZE = "invalid_size"
    INVALID_FILTER_TEXT = "invalid_filter_text"


@dataclass(frozen=True)
class Diagnostic:
    """One finding about an ESS layer or an editor rule row.

    Attributes:
        code: A :class:`DiagnosticCode` value. Plain strings compare equal.
        severity: How much of the source was lost.
        message: Human-readable description of the problem.
        layer_id: The ESS layer ``id``, for import findings.
        rule_id: The editor row id, for findings raised while compiling a row.
    """

    code: str
    severity: Severity
    message: str
    layer_id: str | None = None
    rule_id: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        location = ""
        if self.layer_id:
            location = f" [layer={self.layer_id}]"
        elif self.rule_id is not None:
            location = f" [rule={self.rule_id}]"
        return f"{self.severity.value}{location}: {self.message}"
