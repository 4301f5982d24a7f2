"""Interactive editing model: rule rows, the debounced style document, shared snapshots."""

from tilestyle.editor.document import StyleDoc
from tilestyle.editor.rule import EditAction, EditRule, SymbolType
from tilestyle.editor.shared import SharedStyle

__all__ = [
    "StyleDoc",
    "EditRule",
    "EditAction",
    "SymbolType",
    "SharedStyle",
]
