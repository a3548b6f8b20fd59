"""Namespace colour assignment.

``NamespacePalette`` is an explicit registry owned by the caller: colours are
handed out in first-seen order so neighbouring namespaces never collide
until the palette wraps. ``hashed_namespace_color`` is the stateless
alternative whose result does not depend on call order.
"""

from __future__ import annotations

import hashlib
import threading

NAMESPACE_PALETTE: tuple[str, ...] = (
    "#dc2626",  # red-600
    "#2563eb",  # blue-600
    "#16a34a",  # green-600
    "#9333ea",  # purple-600
    "#ea580c",  # orange-600
    "#0891b2",  # cyan-600
    "#c026d3",  # fuchsia-600
    "#65a30d",  # lime-600
    "#0d9488",  # teal-600
    "#e11d48",  # rose-600
    "#7c3aed",  # violet-600
    "#ca8a04",  # yellow-600
    "#4f46e5",  # indigo-600
    "#db2777",  # pink-600
    "#059669",  # emerald-600
    "#d97706",  # amber-600
)

NAMED_NAMESPACE_COLORS: dict[str, str] = {
    "production": "#991b1b",
    "prod": "#991b1b",
    "staging": "#854d0e",
    "stg": "#854d0e",
    "dev": "#1e40af",
    "development": "#1e40af",
    "default": "#374151",
}

EXTERNAL_COLOR = "#44403c"


class NamespacePalette:
    """Thread-safe first-seen colour registry for namespaces."""

    def __init__(self, palette: tuple[str, ...] = NAMESPACE_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must contain at least one colour")
        self._palette = palette
        self._assigned: dict[str, str] = {}
        self._lock = threading.Lock()

    def color_for(self, namespace: str | None) -> str:
        """Colour for ``namespace``; well-known environment names get fixed colours."""
        if not namespace:
            return EXTERNAL_COLOR
        named = NAMED_NAMESPACE_COLORS.get(namespace.lower())
        if named is not None:
            return named
        with self._lock:
            color = self._assigned.get(namespace)
            if color is None:
                color = self._palette[len(self._assigned) % len(self._palette)]
                self._assigned[namespace] = color
            return color

    def assignments(self) -> dict[str, str]:
        with self._lock:
            return dict(self._assigned)


def hashed_namespace_color(namespace: str | None, palette: tuple[str, ...] = NAMESPACE_PALETTE) -> str:
    """Deterministic colour for ``namespace`` that needs no shared state."""
    if not namespace:
        return EXTERNAL_COLOR
    named = NAMED_NAMESPACE_COLORS.get(namespace.lower())
    if named is not None:
        return named
    digest = hashlib.sha256(namespace.encode("utf-8")).digest()
    return palette[int.from_bytes(digest[:4], "big") % len(palette)]
