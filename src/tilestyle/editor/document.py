"""Editable style document: background color, ordered rule rows, change debouncing.

The editor mutates the document on the UI tick. Edits are not committed one
by one: each change restarts a short debounce window, and only when a tick
observes that the window has elapsed does the document set ``is_changed``
and publish a fresh immutable :class:`VectorTileStyle`. The renderer
consumes that snapshot and calls :meth:`StyleDoc.mark_unchanged`.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from tilestyle.config import DEFAULT_CONFIG, StyleConfig
from tilestyle.diagnostics import DiagnosticSink, logging_sink
from tilestyle.editor.rule import EditAction, EditRule
from tilestyle.editor.shared import SharedStyle
from tilestyle.ess.model import StyleFormatError, load_ess
from tilestyle.ess.translator import StyleTranslator
from tilestyle.events.bus import EventBus
from tilestyle.events.types import StyleCommitted, StyleLoaded, StyleLoadFailed
from tilestyle.model.color import Color
from tilestyle.model.style import VectorTileStyle

__all__ = ["StyleDoc"]

logger = logging.getLogger("tilestyle.editor")

_EDITABLE_FIELDS = frozenset({
    "layer_name",
    "filter_text",
    "color",
    "size",
    "halo_color",
    "halo_width",
    "pattern",
    "symbol_type",
})


class StyleDoc:
    """The style being edited.

    ``last_rule_id`` only grows while the document lives (removing rows never
    frees an id); loading a new style renumbers rows from 1.
    """

    def __init__(
        self,
        style: VectorTileStyle | None = None,
        config: StyleConfig | None = None,
        clock: Callable[[], int] = time.monotonic_ns,
        shared: SharedStyle | None = None,
        bus: EventBus | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.shared = shared
        self.bus = bus
        self._clock = clock
        self._interval_ns = round(self.config.debounce_interval * 1_000_000_000)
        self._sink = sink or logging_sink(logger)

        self.background_color: Color = self.config.default_background
        self.rules: list[EditRule] = []
        self.last_rule_id = 0
        self.is_changed = False
        self.last_changed_at: int | None = None  # clock reading, nanoseconds

        if style is not None:
            self._replace(style)

    # --- ids ------------------------------------------------------------------

    def next_rule_id(self) -> int:
        self.last_rule_id += 1
        return self.last_rule_id

    def rule_by_id(self, rule_id: int) -> EditRule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    # --- change tracking ------------------------------------------------------

    def mark_changed(self) -> None:
        """Start (or restart) the debounce window."""
        self.last_changed_at = self._clock()

    def mark_unchanged(self) -> None:
        """Called by the consumer once it has picked up the committed style."""
        self.is_changed = False

    @property
    def is_pending(self) -> bool:
        return self.last_changed_at is not None

    def tick(self) -> bool:
        """Commit pending edits once the debounce window has elapsed.

        Returns True when this call committed.
        """
        if self.last_changed_at is None:
            return False
        if self._clock() - self.last_changed_at < self._interval_ns:
            return False

        self.is_changed = True
        self.last_changed_at = None
        self._publish()
        return True

    def _publish(self) -> None:
        style = self.style()
        version = self.shared.publish(style) if self.shared is not None else 0
        if self.bus is not None:
            self.bus.emit(StyleCommitted(style=style, version=version))

    # --- rule list operations -------------------------------------------------

    def add_rule(self) -> EditRule:
        """Append an empty rule; it draws nothing, so no change is scheduled."""
        rule = EditRule.empty(self.next_rule_id())
        self.rules.append(rule)
        return rule

    def remove_rule(self, index: int) -> EditRule:
        rule = self.rules.pop(index)
        self.mark_changed()
        return rule

    def move_up(self, index: int) -> bool:
        if not 0 < index < len(self.rules):
            return False
        self.rules[index - 1], self.rules[index] = self.rules[index], self.rules[index - 1]
        self.mark_changed()
        return True

    def move_down(self, index: int) -> bool:
        if not 0 <= index < len(self.rules) - 1:
            return False
        self.rules[index], self.rules[index + 1] = self.rules[index + 1], self.rules[index]
        self.mark_changed()
        return True

    def modify_rule(self, index: int, **changes: Any) -> EditRule:
        """Set fields of the rule at *index*; only real changes schedule a commit."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise AttributeError(f"Not an editable rule field: {', '.join(sorted(unknown))}")
        rule = self.rules[index]
        changed = False
        for name, value in changes.items():
            if getattr(rule, name) != value:
                setattr(rule, name, value)
                changed = True
        if changed:
            self.mark_changed()
        return rule

    def set_background(self, color: Color) -> None:
        if color != self.background_color:
            self.background_color = color
            self.mark_changed()

    def apply_actions(self) -> EditAction:
        """Apply the first action raised by a row this frame and reset all actions.

        Returns the action that was applied (``EditAction.NONE`` if there was none).
        """
        selected: tuple[int, EditAction] | None = None
        for index, rule in enumerate(self.rules):
            if selected is None and rule.action is not EditAction.NONE:
                selected = (index, rule.action)
            rule.action = EditAction.NONE

        if selected is None:
            return EditAction.NONE

        index, action = selected
        if action is EditAction.MOVE_UP:
            self.move_up(index)
        elif action is EditAction.MOVE_DOWN:
            self.move_down(index)
        elif action is EditAction.REMOVE:
            self.remove_rule(index)
        elif action is EditAction.MODIFIED:
            self.mark_changed()
        return action

    # --- loading --------------------------------------------------------------

    def _replace(self, style: VectorTileStyle) -> None:
        self.rules = [
            EditRule.from_style_rule(rule, rule_id)
            for rule_id, rule in enumerate(style.rules, start=1)
        ]
        self.last_rule_id = len(self.rules)
        self.background_color = style.background

    def load_style(self, style: VectorTileStyle, source: str = "style") -> None:
        """Replace the document content with *style* and schedule a commit."""
        self._replace(style)
        self.mark_changed()
        if self.bus is not None:
            self.bus.emit(StyleLoaded(source=source, rule_count=len(self.rules)))

    def load_ess_file(self, path: str | Path) -> bool:
        """Import an ESS JSON file; on failure log it and keep the current document."""
        try:
            ess = load_ess(Path(path))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, StyleFormatError) as exc:
            logger.error("Failed to load style from %s: %s", path, exc)
            if self.bus is not None:
                self.bus.emit(StyleLoadFailed(path=str(path), error=str(exc)))
            return False

        translator = StyleTranslator(config=self.config, sink=self._sink)
        self.load_style(translator.translate(ess), source=str(path))
        logger.info("Loaded %d rules from %s", len(self.rules), path)
        return True

    # --- compilation ----------------------------------------------------------

    def style(self) -> VectorTileStyle:
        """Build an immutable style from the current rows."""
        return VectorTileStyle(
            background=self.background_color,
            rules=tuple(rule.to_style_rule(self.config, self._sink) for rule in self.rules),
        )

    # --- persistence ----------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "background": list(self.background_color.to_tuple()),
            "rules": [rule.to_dict() for rule in self.rules],
            "last_rule_id": self.last_rule_id,
            "is_changed": self.is_changed,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], **kwargs: Any) -> StyleDoc:
        """Restore a document; *kwargs* are passed to the constructor."""
        doc = cls(**kwargs)
        if "background" in data:
            doc.background_color = Color.from_tuple(data["background"])
        doc.rules = [EditRule.from_dict(r) for r in data.get("rules", [])]
        highest = max((r.id for r in doc.rules), default=0)
        doc.last_rule_id = max(int(data.get("last_rule_id", 0)), highest)
        doc.is_changed = bool(data.get("is_changed", False))
        return doc

    def save(self, path: Path) -> None:
        """Serialise to JSON and write to *path*."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path, **kwargs: Any) -> StyleDoc:
        """Deserialise a document from a JSON file at *path*."""
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_dict(data, **kwargs)

    def __repr__(self) -> str:
        return (
            f"StyleDoc(rules={len(self.rules)}, last_rule_id={self.last_rule_id}, "
            f"is_changed={self.is_changed})"
        )
