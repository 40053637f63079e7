"""
High-level item API.
"""

from texfill.api.items import CompoundPath, PointText, TexturedShape, TextureEventData
from texfill.api.layout import GlyphRun, TextLayout
from texfill.api.path import Path, Segment, Subpath
from texfill.api.style import Shadow, Style

__all__ = [
    "CompoundPath",
    "GlyphRun",
    "Path",
    "PointText",
    "Segment",
    "Shadow",
    "Style",
    "Subpath",
    "TextLayout",
    "TextureEventData",
    "TexturedShape",
]
