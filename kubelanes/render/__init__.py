"""Presentation helpers shared with the swimlane renderer."""

from kubelanes.render.palette import NamespacePalette, hashed_namespace_color

__all__ = ["NamespacePalette", "hashed_namespace_color"]
