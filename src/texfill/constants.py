"""
Various constants for texfill
"""

from enum import Enum, IntFlag

#: Number of decoded bitmaps kept by a :py:class:`~texfill.cache.BitmapCache`.
DEFAULT_CACHE_CAPACITY = 10

#: Minimum headroom in user units added around an offscreen silhouette.
MIN_HEADROOM = 50.0

#: Largest offscreen surface, in pixels, a provider agrees to allocate.
DEFAULT_MAX_PIXELS = 4096 * 4096

#: Number of released offscreen surfaces kept for reuse.
DEFAULT_POOL_SIZE = 4

#: Worker threads used for fetching and decoding textures.
DEFAULT_MAX_WORKERS = 2

#: Timeout in seconds for remote texture fetches.
DEFAULT_FETCH_TIMEOUT = 30.0

#: Default font size in user units.
DEFAULT_FONT_SIZE = 10.0

#: Leading as a multiple of the font size when not set explicitly.
LEADING_RATIO = 1.2

#: Fraction of the leading above the baseline of a text line.
ASCENT_RATIO = 0.75


class CompositeOperation(str, Enum):
    """
    Compositing operators supported by
    :py:class:`~texfill.render.surface.RasterSurface`.
    """

    SOURCE_OVER = "source-over"
    SOURCE_ATOP = "source-atop"


class FillRule(str, Enum):
    """
    Fill rule for multi-subpath shapes.
    """

    NONZERO = "nonzero"
    EVENODD = "evenodd"


class Justification(str, Enum):
    """
    Horizontal justification of text lines.
    """

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def factor(self) -> float:
        """Fraction of the line width placed left of the anchor."""
        return {
            Justification.LEFT: 0.0,
            Justification.CENTER: 0.5,
            Justification.RIGHT: 1.0,
        }[self]


class Change(IntFlag):
    """
    Change flags passed to the style-changed signal of textured items.
    """

    STYLE = 1
    CONTENT = 2
    GEOMETRY = 4


class TextureEvent(str, Enum):
    """
    Notifications emitted by textured items.
    """

    LOAD = "load"
    ERROR = "error"
