"""Glyph run rasterization with Pillow."""

import functools
import logging
import os
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=32)
def load_font(family: Optional[str], size: float) -> ImageFont.FreeTypeFont:
    """
    Load a font by file path or font name, falling back to Pillow's
    built-in scalable font.
    """
    size = max(1, int(round(size)))
    if family:
        try:
            return ImageFont.truetype(os.fspath(family), size)
        except OSError:
            logger.warning("Font not found: %s, using default font" % family)
    return ImageFont.load_default(size=size)


def measure_line(font: ImageFont.FreeTypeFont, text: str) -> float:
    """Advance width of a line of text."""
    return float(font.getlength(text)) if text else 0.0


def draw_line_mask(
    font: ImageFont.FreeTypeFont, text: str, stroke_width: float = 0.0
) -> Optional[tuple[np.ndarray, float, float]]:
    """
    Rasterize a line of text relative to its left baseline point.

    With ``stroke_width`` the mask covers the outline only. Pillow strokes
    outside the glyphs, so the ring is ``stroke_width / 2`` wide; the inner
    half of a centered stroke lies under the fill anyway.

    :return: ``(mask, left, top)`` where ``mask`` is a float32 coverage array
        of shape (height, width) and ``(left, top)`` is the position of its
        top-left corner relative to the baseline origin, or ``None`` when
        the line has no visible glyphs.
    """
    if not text:
        return None
    radius = int(round(stroke_width / 2)) if stroke_width > 0 else 0
    if stroke_width > 0 and radius == 0:
        radius = 1
    left, top, right, bottom = font.getbbox(text, anchor="ls", stroke_width=radius)
    width, height = int(right - left), int(bottom - top)
    if width <= 0 or height <= 0:
        return None
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    if radius:
        draw.text(
            (-left, -top),
            text,
            fill=0,
            font=font,
            anchor="ls",
            stroke_width=radius,
            stroke_fill=255,
        )
    else:
        draw.text((-left, -top), text, fill=255, font=font, anchor="ls")
    return np.asarray(image, dtype=np.float32) / 255.0, float(left), float(top)
