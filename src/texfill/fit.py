"""
Fit calculator.

Computes where a texture lands inside a silhouette box. The computation is
a pure function of the box size, the texture aspect ratio and the
:py:class:`~texfill.settings.TextureSettings`; it produces the drawn size
of the texture and the ordered transform operations to apply before the
texture is drawn at the origin::

    fit = compute_fit(100, 50, image.aspect_ratio, settings)
    with surface.saved():
        fit.apply(surface)
        surface.draw_image(image, 0, 0, fit.draw_width, fit.draw_height)

The baseline policy is cover: the texture is enlarged just enough to cover
the box on its constraining axis, never letterboxed.
"""

import logging
from typing import Optional

import numpy as np
from attrs import define, field

from texfill.errors import DegenerateGeometry
from texfill.render.utils import rotation_matrix, scale_matrix, translation_matrix
from texfill.settings import TextureSettings

logger = logging.getLogger(__name__)

_MATRIX_FUNC = {
    "translate": translation_matrix,
    "scale": scale_matrix,
    "rotate": rotation_matrix,
}


@define(frozen=True)
class TransformOp:
    """
    Single transform operation. ``rotate`` takes degrees.
    """

    name: str = field()
    args: tuple[float, ...] = field(converter=tuple)

    @name.validator
    def _check_name(self, attribute, value):
        if value not in _MATRIX_FUNC:
            raise ValueError("Unknown transform operation: %r" % value)

    def apply(self, surface) -> None:
        getattr(surface, self.name)(*self.args)

    def matrix(self) -> np.ndarray:
        return _MATRIX_FUNC[self.name](*self.args)


@define(frozen=True)
class FitResult:
    """Drawn texture size and its placement operations."""

    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float
    operations: tuple[TransformOp, ...] = field(converter=tuple)

    def apply(self, surface) -> None:
        """Apply the operations, in order, to a drawing context."""
        for op in self.operations:
            op.apply(surface)

    def matrix(self) -> np.ndarray:
        """Compose the operations into one 3x3 affine matrix."""
        result = np.identity(3)
        for op in self.operations:
            result = result @ op.matrix()
        return result


def _value(value: Optional[float], default: float) -> float:
    return default if value is None else value


def compute_fit(
    width: float,
    height: float,
    aspect_ratio: float,
    settings: Optional[TextureSettings] = None,
) -> FitResult:
    """
    Fit a texture of ``aspect_ratio`` (width / height) into a box.

    :param width: target box width.
    :param height: target box height.
    :param aspect_ratio: texture width divided by texture height.
    :param settings: placement settings, defaults apply when ``None``.
    :raises DegenerateGeometry: when the box or the fitted texture has no
        area; callers skip the textured draw.
    """
    if width <= 0 or height <= 0:
        raise DegenerateGeometry("Empty target box: %gx%g" % (width, height))
    if not aspect_ratio > 0:
        raise DegenerateGeometry("Invalid aspect ratio: %r" % (aspect_ratio,))
    settings = settings or TextureSettings()

    draw_width = float(width)
    draw_height = draw_width / aspect_ratio
    if draw_height < height:
        draw_height = float(height)
        draw_width = draw_height * aspect_ratio

    if settings.text_width is not None:
        draw_width = settings.text_width
        draw_height = draw_width / aspect_ratio
        if settings.text_height is not None and draw_height < settings.text_height:
            draw_height = settings.text_height
            draw_width = draw_height * aspect_ratio

    offset_x = -_value(settings.offset_left, 0.0)
    offset_y = -_value(settings.offset_top, 0.0)

    if settings.sync_ratio:
        scaling = _value(settings.scaling, 1.0)
        draw_width *= scaling
        draw_height *= scaling
    else:
        draw_width *= _value(settings.scaling_x, 1.0)
        draw_height *= _value(settings.scaling_y, 1.0)

    offset_x += _value(settings.left_position, 0.0)
    offset_y -= _value(settings.top_position, 0.0)

    if draw_width <= 0 or draw_height <= 0:
        raise DegenerateGeometry(
            "Fitted texture has no area: %gx%g" % (draw_width, draw_height)
        )

    operations = [TransformOp("translate", (offset_x, offset_y))]
    if settings.horizontal_flip:
        operations.append(TransformOp("translate", (draw_width, 0.0)))
        operations.append(TransformOp("scale", (-1.0, 1.0)))
    if settings.vertical_flip:
        operations.append(TransformOp("translate", (0.0, draw_height)))
        operations.append(TransformOp("scale", (1.0, -1.0)))
    if settings.rotation is not None:
        operations.append(TransformOp("translate", (draw_width / 2, draw_height / 2)))
        operations.append(TransformOp("rotate", (settings.rotation,)))
        operations.append(TransformOp("translate", (-draw_width / 2, -draw_height / 2)))

    logger.debug(
        "Fit %gx%g (ratio %g) -> %gx%g at (%g, %g)"
        % (width, height, aspect_ratio, draw_width, draw_height, offset_x, offset_y)
    )
    return FitResult(draw_width, draw_height, offset_x, offset_y, operations)
