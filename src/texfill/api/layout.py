"""
Text layout.

:py:class:`TextLayout` measures lines of a text item and supplies leading;
:py:class:`GlyphRun` is the silhouette of a single line. Coordinates are
relative to the baseline anchor of the line: the line box starts
``ASCENT_RATIO * leading`` above the baseline and is one leading tall.
"""

import logging
from typing import Sequence

from attrs import define

from texfill.api.style import Style
from texfill.constants import ASCENT_RATIO
from texfill.render.text import draw_line_mask, load_font, measure_line

logger = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]


class TextLayout(object):
    """Line metrics for a character style."""

    def __init__(self, style: Style):
        self.style = style
        self.font = load_font(style.font_family, style.font_size)

    @property
    def leading(self) -> float:
        return self.style.get_leading()

    def line_width(self, text: str) -> float:
        return measure_line(self.font, text)

    def line_bounds(self, text: str) -> Rect:
        width = self.line_width(text)
        return (
            -width * self.style.justification.factor,
            -ASCENT_RATIO * self.leading,
            width,
            self.leading,
        )

    def block_bounds(self, lines: Sequence[str]) -> Rect:
        """Bounds of all lines, the first baseline at y = 0."""
        width = max((self.line_width(line) for line in lines), default=0.0)
        return (
            -width * self.style.justification.factor,
            -ASCENT_RATIO * self.leading if lines else 0.0,
            width,
            len(lines) * self.leading,
        )

    def run(self, text: str) -> "GlyphRun":
        return GlyphRun(self, text)


@define
class GlyphRun:
    """One line of text usable as a silhouette."""

    layout: TextLayout
    text: str

    @property
    def bounds(self) -> Rect:
        return self.layout.line_bounds(self.text)

    def fill(self, surface, style: Style) -> None:
        if style.has_fill():
            self._paint(surface, style.fill_color, 0.0)

    def stroke(self, surface, style: Style) -> None:
        if style.has_stroke():
            self._paint(surface, style.stroke_color, style.stroke_width)

    def _paint(self, surface, color, stroke_width: float) -> None:
        rendered = draw_line_mask(self.layout.font, self.text, stroke_width)
        if rendered is None:
            return
        mask, left, top = rendered
        x = self.bounds[0]
        surface.fill_mask(mask, x + left, top, color)
