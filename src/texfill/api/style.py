"""
Paint style of drawable items.

Colors are RGBA tuples of floats in ``[0, 1]``. Any CSS color string
understood by :py:mod:`PIL.ImageColor` is accepted as well::

    style = Style(fill_color='#ff8800', stroke_color='black', stroke_width=2)
"""

import logging
from typing import Optional, Sequence, Union

from attrs import define, field
from PIL import ImageColor

from texfill.constants import (
    DEFAULT_FONT_SIZE,
    LEADING_RATIO,
    FillRule,
    Justification,
)

logger = logging.getLogger(__name__)

Color = tuple[float, float, float, float]


def to_color(value: Union[str, Sequence[float], None]) -> Optional[Color]:
    """Convert a CSS string or a 3/4-tuple of floats into an RGBA tuple."""
    if value is None:
        return None
    if isinstance(value, str):
        rgba = ImageColor.getcolor(value, "RGBA")
        return tuple(c / 255.0 for c in rgba)  # type: ignore[return-value]
    components = tuple(float(c) for c in value)
    if len(components) == 3:
        components += (1.0,)
    if len(components) != 4:
        raise ValueError("Invalid color: %r" % (value,))
    return components  # type: ignore[return-value]


@define(frozen=True)
class Shadow:
    """Canvas-style drop shadow."""

    color: Color = field(converter=to_color)
    blur: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0


def _to_shadow(value) -> Optional[Shadow]:
    if value is None or isinstance(value, Shadow):
        return value
    return Shadow(**value)


@define(frozen=True)
class Style:
    """
    Fill, stroke, shadow and character style snapshot.
    """

    fill_color: Optional[Color] = field(default=(0.0, 0.0, 0.0, 1.0), converter=to_color)
    stroke_color: Optional[Color] = field(default=None, converter=to_color)
    stroke_width: float = field(default=1.0, converter=float)
    fill_rule: FillRule = field(default=FillRule.NONZERO, converter=FillRule)
    shadow: Optional[Shadow] = field(default=None, converter=_to_shadow)
    font_family: Optional[str] = None
    font_size: float = field(default=DEFAULT_FONT_SIZE, converter=float)
    leading: Optional[float] = None
    justification: Justification = field(
        default=Justification.LEFT, converter=Justification
    )

    def has_fill(self) -> bool:
        return self.fill_color is not None and self.fill_color[3] > 0

    def has_stroke(self) -> bool:
        return (
            self.stroke_color is not None
            and self.stroke_color[3] > 0
            and self.stroke_width > 0
        )

    def get_leading(self) -> float:
        """Explicit leading, or the font size times the default ratio."""
        if self.leading is not None:
            return float(self.leading)
        return self.font_size * LEADING_RATIO
