"""
Offscreen texture compositing.

The textured fill of a silhouette is built on an offscreen surface:

1. the silhouette is filled, establishing the destination alpha;
2. the operator switches to ``source-atop`` so the texture only replaces
   color where the silhouette is opaque;
3. the texture is drawn through the fit transform;
4. the operator returns to ``source-over`` and the outline is stroked on top;
5. the offscreen surface is drawn back onto the target where the flat fill
   would have been.

Any failure to allocate the offscreen surface leaves the target untouched
and reports ``False`` so the caller can draw the flat fill instead.
"""

import logging
import math
from typing import TYPE_CHECKING, Optional

import attrs

from texfill.constants import MIN_HEADROOM, CompositeOperation
from texfill.errors import SurfaceAcquisitionFailure
from texfill.render.surface import RasterSurface, SurfaceProvider
from texfill.render.utils import linear_scale

if TYPE_CHECKING:
    from texfill.api.protocols import Silhouette
    from texfill.fit import FitResult

logger = logging.getLogger(__name__)

_DEFAULT_PROVIDER = SurfaceProvider()


def stabilization_margin(
    stroke_width: float,
    width: float = 0.0,
    height: float = 0.0,
    rotation: Optional[float] = None,
    minimum: float = MIN_HEADROOM,
) -> float:
    """
    Headroom around the silhouette box on each side of the offscreen surface.

    The margin is the stroke width plus the larger of a fixed minimum and
    the growth of the box when rotated by ``rotation`` degrees.
    """
    growth = 0.0
    if rotation:
        theta = math.radians(rotation)
        c, s = abs(math.cos(theta)), abs(math.sin(theta))
        growth = max(width * c + height * s - width, width * s + height * c - height) / 2
    return max(stroke_width, 0.0) + max(growth, minimum)


def composite_textured_fill(
    target: RasterSurface,
    silhouette: "Silhouette",
    bitmap,
    fit: "FitResult",
    style,
    provider: Optional[SurfaceProvider] = None,
    supersample: float = 1.0,
    rotation: Optional[float] = None,
    origin: Optional[tuple[float, float]] = None,
) -> bool:
    """
    Draw ``silhouette`` onto ``target`` filled with ``bitmap``.

    :param target: destination surface; its current transform places the
        silhouette.
    :param silhouette: object exposing ``bounds`` and ``fill(surface, style)``
        / ``stroke(surface, style)``.
    :param bitmap: texture to draw, see
        :py:meth:`~texfill.render.surface.RasterSurface.draw_image`.
    :param fit: placement from :py:func:`~texfill.fit.compute_fit`.
    :param style: style snapshot of the item.
    :param provider: offscreen surface provider.
    :param supersample: extra resolution factor of the offscreen pass.
    :param rotation: texture rotation, used to size the margin.
    :param origin: point the fit is relative to; defaults to the top-left
        corner of the silhouette box.
    :return: ``True`` if the textured fill was drawn, ``False`` if the caller
        should fall back to the flat fill.
    """
    provider = provider or _DEFAULT_PROVIDER
    x, y, width, height = silhouette.bounds
    if width <= 0 or height <= 0:
        logger.debug("Skipping textured fill of empty silhouette")
        return False

    margin = stabilization_margin(
        style.stroke_width if style.has_stroke() else 0.0, width, height, rotation
    )
    resolution = max(linear_scale(target.matrix), 1e-6) * supersample
    pixel_width = int(math.ceil((width + 2 * margin) * resolution))
    pixel_height = int(math.ceil((height + 2 * margin) * resolution))

    try:
        surface = provider.acquire(pixel_width, pixel_height)
    except SurfaceAcquisitionFailure as e:
        logger.warning("Skipping textured fill: %s" % e)
        return False
    try:
        offscreen_style = attrs.evolve(style, shadow=None)
        surface.scale(resolution)
        surface.translate(margin - x, margin - y)
        silhouette.fill(surface, offscreen_style)

        with surface.saved():
            surface.composite_operation = CompositeOperation.SOURCE_ATOP
            surface.translate(*(origin or (x, y)))
            fit.apply(surface)
            surface.draw_image(bitmap, 0, 0, fit.draw_width, fit.draw_height)

        if style.has_stroke():
            silhouette.stroke(surface, offscreen_style)

        target.draw_image(
            surface,
            x - margin,
            y - margin,
            pixel_width / resolution,
            pixel_height / resolution,
        )
    finally:
        provider.release(surface)
    return True
