"""Path rasterization for fills and strokes."""

import logging
from typing import Optional

import numpy as np
from PIL import Image

from texfill.constants import FillRule
from texfill.render._compat import require_aggdraw

logger = logging.getLogger(__name__)


@require_aggdraw
def draw_fill_mask(path, width: int, height: int, fill_rule=FillRule.NONZERO) -> np.ndarray:
    """
    Rasterize the interior of a device-space path.

    Each subpath is drawn into its own coverage plane. Planes are merged by
    exclusive union for the even-odd rule, and by the clipped sum of planes
    signed with each subpath's orientation for the nonzero rule.

    :return: float32 coverage array of shape (height, width, 1).
    """
    mask = np.zeros((height, width, 1), dtype=np.float32)
    if fill_rule == FillRule.EVENODD:
        for subpath in path:
            plane = _draw_subpath(subpath, width, height, brush={"color": 255})
            if plane is None:
                continue
            mask = mask + plane - 2 * mask * plane
    else:
        for subpath in path:
            plane = _draw_subpath(subpath, width, height, brush={"color": 255})
            if plane is None:
                continue
            mask = mask + np.sign(subpath.signed_area() or 1.0) * plane
        mask = np.abs(mask)
    return np.minimum(1, np.maximum(0, mask)).astype(np.float32)


@require_aggdraw
def draw_stroke_mask(path, width: int, height: int, line_width: float) -> np.ndarray:
    """
    Rasterize the outline of a device-space path.

    :return: float32 coverage array of shape (height, width, 1).
    """
    mask = np.zeros((height, width, 1), dtype=np.float32)
    for subpath in path:
        plane = _draw_subpath(
            subpath,
            width,
            height,
            pen={"color": 255, "width": max(line_width, 0.0)},
            min_knots=2,
        )
        if plane is not None:
            mask = mask + plane - mask * plane
    return mask


def _draw_subpath(
    subpath,
    width: int,
    height: int,
    brush: Optional[dict] = None,
    pen: Optional[dict] = None,
    min_knots: int = 3,
) -> Optional[np.ndarray]:
    """
    Rasterize one subpath using aggdraw.

    Note: Callers must be decorated with @require_aggdraw before calling.
    """
    import aggdraw  # type: ignore[import-not-found]

    if len(subpath) < min_knots:
        logger.debug("not enough knots: %d" % len(subpath))
        return None
    mask = Image.new("L", (width, height), 0)
    draw = aggdraw.Draw(mask)
    pen = aggdraw.Pen(**pen) if pen else None
    brush = aggdraw.Brush(**brush) if brush else None
    symbol = aggdraw.Symbol(" ".join(map(str, subpath.symbol())))
    draw.symbol((0, 0), symbol, pen, brush)
    draw.flush()
    del draw
    return np.expand_dims(np.array(mask).astype(np.float32) / 255.0, 2)
