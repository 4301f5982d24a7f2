"""Thread-safe holder of the latest committed style snapshot."""

from __future__ import annotations

import threading

from tilestyle.model.style import VectorTileStyle


class SharedStyle:
    """Latest committed :class:`VectorTileStyle`, shared between editor and renderer.

    The editor replaces the whole snapshot on each commit; readers always get
    a complete, immutable style and never a partially edited rule list.
    """

    def __init__(self, initial: VectorTileStyle | None = None) -> None:
        self._lock = threading.Lock()
        self._style = initial if initial is not None else VectorTileStyle()
        self._version = 0

    def publish(self, style: VectorTileStyle) -> int:
        """Replace the snapshot and return its new version number."""
        with self._lock:
            self._style = style
            self._version += 1
            return self._version

    def snapshot(self) -> VectorTileStyle:
        with self._lock:
            return self._style

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        with self._lock:
            return self._version

    def __repr__(self) -> str:
        with self._lock:
            return f"SharedStyle(version={self._version}, rules={len(self._style.rules)})"
