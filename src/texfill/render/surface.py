"""
Raster drawing surfaces.

:py:class:`RasterSurface` is the drawing context used by the compositor. It
keeps non-premultiplied float32 ``color`` and ``alpha`` planes, a current
transformation matrix and a compositing operator, much like an HTML canvas
context::

    surface = RasterSurface(200, 100)
    surface.translate(10, 10)
    surface.fill_path(Path.rectangle(0, 0, 50, 50), Style(fill_color='red'))
    surface.to_pil().save('out.png')

:py:class:`SurfaceProvider` hands out offscreen surfaces and takes them back
for reuse.
"""

import contextlib
import logging
import math
from typing import Iterator, Optional, Union

import numpy as np
from PIL import Image

from texfill.constants import (
    DEFAULT_MAX_PIXELS,
    DEFAULT_POOL_SIZE,
    CompositeOperation,
)
from texfill.errors import SurfaceAcquisitionFailure
from texfill.render import vector
from texfill.render._compat import require_scipy, require_skimage
from texfill.render.blend import OPERATORS
from texfill.render.utils import (
    divide,
    intersect,
    linear_scale,
    rotation_matrix,
    scale_matrix,
    transform_points,
    translation_matrix,
)

logger = logging.getLogger(__name__)


class RasterSurface(object):
    """
    Float32 RGBA surface with canvas-like drawing state.

    :param width: width in pixels.
    :param height: height in pixels.
    :param color: initial color, scalar or RGB tuple in [0, 1].
    :param alpha: initial alpha in [0, 1].
    """

    def __init__(
        self,
        width: int,
        height: int,
        color: Union[float, tuple[float, ...]] = 0.0,
        alpha: float = 0.0,
    ):
        if width <= 0 or height <= 0:
            raise ValueError("Invalid surface size: %dx%d" % (width, height))
        self._width = int(width)
        self._height = int(height)
        self._color = np.empty((self._height, self._width, 3), dtype=np.float32)
        self._alpha = np.empty((self._height, self._width, 1), dtype=np.float32)
        self._stack: list[tuple] = []
        self.clear(color, alpha)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def color(self) -> np.ndarray:
        """Color plane of shape (height, width, 3)."""
        return self._color

    @property
    def alpha(self) -> np.ndarray:
        """Alpha plane of shape (height, width, 1)."""
        return self._alpha

    @property
    def matrix(self) -> np.ndarray:
        """Copy of the current transformation matrix."""
        return self._matrix.copy()

    @matrix.setter
    def matrix(self, value: np.ndarray) -> None:
        self._matrix = np.array(value, dtype=np.float64).reshape(3, 3)

    @property
    def composite_operation(self) -> CompositeOperation:
        return self._operation

    @composite_operation.setter
    def composite_operation(self, value: Union[str, CompositeOperation]) -> None:
        self._operation = CompositeOperation(value)

    def clear(self, color: Union[float, tuple[float, ...]] = 0.0, alpha: float = 0.0) -> None:
        """Reset pixels and drawing state."""
        self._color[...] = color
        self._alpha[...] = alpha
        self._matrix = np.identity(3)
        self._operation = CompositeOperation.SOURCE_OVER
        self.shadow = None
        self._stack.clear()

    # Drawing state.

    def save(self) -> None:
        self._stack.append((self._matrix.copy(), self._operation, self.shadow))

    def restore(self) -> None:
        if not self._stack:
            logger.debug("restore() without matching save()")
            return
        self._matrix, self._operation, self.shadow = self._stack.pop()

    @contextlib.contextmanager
    def saved(self) -> Iterator["RasterSurface"]:
        """Scope that restores the drawing state on exit."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    def transform(self, matrix: np.ndarray) -> None:
        self._matrix = self._matrix @ matrix

    def translate(self, tx: float, ty: float) -> None:
        self.transform(translation_matrix(tx, ty))

    def scale(self, sx: float, sy: Optional[float] = None) -> None:
        self.transform(scale_matrix(sx, sx if sy is None else sy))

    def rotate(self, degrees: float) -> None:
        self.transform(rotation_matrix(degrees))

    def reset_transform(self) -> None:
        self._matrix = np.identity(3)

    # Painting.

    def fill_path(self, path, style) -> None:
        """Fill ``path`` with the style's fill color and fill rule."""
        if not style.has_fill() or path.is_empty():
            return
        box = self._device_box(path, 1.0)
        if box is None:
            return
        device_path = path.transformed(translation_matrix(-box[0], -box[1]) @ self._matrix)
        coverage = vector.draw_fill_mask(
            device_path, box[2] - box[0], box[3] - box[1], style.fill_rule
        )
        self._paint_solid(style.fill_color, coverage, box)

    def stroke_path(self, path, style) -> None:
        """Stroke ``path`` with the style's stroke color and width."""
        if not style.has_stroke() or path.is_empty():
            return
        line_width = style.stroke_width * linear_scale(self._matrix)
        box = self._device_box(path, line_width / 2 + 1.0)
        if box is None:
            return
        device_path = path.transformed(translation_matrix(-box[0], -box[1]) @ self._matrix)
        coverage = vector.draw_stroke_mask(
            device_path, box[2] - box[0], box[3] - box[1], line_width
        )
        self._paint_solid(style.stroke_color, coverage, box)

    def fill_mask(self, mask: np.ndarray, x: float, y: float, color) -> None:
        """
        Paint a coverage mask of shape (h, w) placed at ``(x, y)`` in user
        space, one mask pixel per user unit.
        """
        mask = np.asarray(mask, dtype=np.float32)
        if mask.size == 0:
            return
        pixels = np.empty(mask.shape + (4,), dtype=np.float32)
        pixels[..., :3] = color[:3]
        pixels[..., 3] = mask * color[3]
        self._draw_pixels(pixels, x, y, mask.shape[1], mask.shape[0])

    def draw_image(self, image, x: float, y: float, width: float, height: float) -> None:
        """
        Draw ``image`` into the user-space rectangle ``(x, y, width, height)``.

        ``image`` may be a :py:class:`~texfill.cache.BitmapResource`, another
        :py:class:`RasterSurface`, a PIL image or an RGBA float array.
        """
        if width == 0 or height == 0:
            return
        self._draw_pixels(_as_pixels(image), x, y, width, height)

    def _draw_pixels(self, pixels: np.ndarray, x, y, width, height) -> None:
        image_height, image_width = pixels.shape[:2]
        if image_width == 0 or image_height == 0:
            return
        matrix = (
            self._matrix
            @ translation_matrix(x, y)
            @ scale_matrix(width / image_width, height / image_height)
        )
        corners = transform_points(
            matrix, [(0, 0), (image_width, 0), (0, image_height), (image_width, image_height)]
        )
        box = self._clip_box(corners, 1.0)
        if box is None:
            return
        color, alpha = _warp(pixels, matrix, box)
        self._paint(color, alpha, box)

    def _paint_solid(self, color, coverage: np.ndarray, box) -> None:
        source = np.array(color[:3], dtype=np.float32).reshape(1, 1, 3)
        self._paint(source, coverage * np.float32(color[3]), box)

    def _paint(self, Cs: np.ndarray, As: np.ndarray, box) -> None:
        """Composite a source window at ``box`` with the current operator."""
        if self.shadow is not None and self.shadow.color[3] > 0:
            self._paint_shadow(As, box)
        left, top, right, bottom = box
        func = OPERATORS[self._operation]
        Cb = self._color[top:bottom, left:right]
        Ab = self._alpha[top:bottom, left:right]
        C, A = func(Cb, Ab, Cs, As)
        self._color[top:bottom, left:right] = C
        self._alpha[top:bottom, left:right] = A

    @require_scipy
    def _paint_shadow(self, As: np.ndarray, box) -> None:
        from scipy import ndimage  # type: ignore[import-untyped]

        shadow = self.shadow
        plane = np.zeros((self._height, self._width), dtype=np.float32)
        left, top, right, bottom = box
        plane[top:bottom, left:right] = As[..., 0]
        plane = ndimage.shift(
            plane, (shadow.offset_y, shadow.offset_x), order=1, mode="constant", cval=0.0
        )
        if shadow.blur > 0:
            plane = ndimage.gaussian_filter(plane, sigma=shadow.blur / 2)
        Cs = np.array(shadow.color[:3], dtype=np.float32).reshape(1, 1, 3)
        As = np.expand_dims(plane * shadow.color[3], 2).astype(np.float32)
        func = OPERATORS[self._operation]
        self._color, self._alpha = func(self._color, self._alpha, Cs, As)

    def _device_box(self, path, padding: float) -> Optional[tuple[int, int, int, int]]:
        x, y, w, h = path.bounds
        corners = transform_points(
            self._matrix, [(x, y), (x + w, y), (x, y + h), (x + w, y + h)]
        )
        return self._clip_box(corners, padding)

    def _clip_box(self, corners: np.ndarray, padding: float) -> Optional[tuple[int, int, int, int]]:
        x0, y0 = corners.min(axis=0) - padding
        x1, y1 = corners.max(axis=0) + padding
        box = intersect(
            (int(math.floor(x0)), int(math.floor(y0)), int(math.ceil(x1)), int(math.ceil(y1))),
            (0, 0, self._width, self._height),
        )
        return None if box == (0, 0, 0, 0) else box

    # Export.

    def numpy(self) -> np.ndarray:
        """RGBA float32 array of shape (height, width, 4)."""
        return np.concatenate((self._color, self._alpha), axis=2)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(
            (np.clip(self.numpy(), 0.0, 1.0) * 255 + 0.5).astype(np.uint8), "RGBA"
        )

    def __repr__(self) -> str:
        return "%s(width=%d, height=%d)" % (
            self.__class__.__name__,
            self._width,
            self._height,
        )


def _as_pixels(image) -> np.ndarray:
    if isinstance(image, RasterSurface):
        return image.numpy()
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0
    pixels = getattr(image, "pixels", image)
    pixels = np.asarray(pixels, dtype=np.float32)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError("Expected RGBA pixels, got shape %r" % (pixels.shape,))
    return pixels


@require_skimage
def _warp(pixels: np.ndarray, matrix: np.ndarray, box) -> tuple[np.ndarray, np.ndarray]:
    """
    Resample ``pixels`` through ``matrix`` into the device window ``box``.

    Sampling happens on premultiplied values so transparent texels do not
    bleed color into edges. Texels clamp at the image border, and the result
    is bounded by the anti-aliased coverage of the destination rectangle.
    """
    from skimage.transform import AffineTransform, warp  # type: ignore[import-untyped]

    left, top, right, bottom = box
    premultiplied = pixels.copy()
    premultiplied[..., :3] *= pixels[..., 3:]
    # Maps window pixel corners to image coordinates.
    window = np.linalg.inv(matrix) @ translation_matrix(left, top)
    # warp() addresses pixel centers with integer coordinates.
    inverse = translation_matrix(-0.5, -0.5) @ window @ translation_matrix(0.5, 0.5)
    out = warp(
        premultiplied,
        AffineTransform(matrix=inverse),
        output_shape=(bottom - top, right - left),
        order=1,
        mode="edge",
        preserve_range=True,
    ).astype(np.float32)
    texel_alpha = np.clip(out[..., 3:], 0.0, 1.0)
    color = np.clip(divide(out[..., :3], texel_alpha), 0.0, 1.0)
    coverage = _rectangle_coverage(
        window, out.shape[:2], pixels.shape[1], pixels.shape[0]
    )
    return color, texel_alpha * coverage


def _rectangle_coverage(window: np.ndarray, shape, width: int, height: int) -> np.ndarray:
    """
    Coverage of the image rectangle ``(0, 0, width, height)`` for each pixel
    of a window, estimated from the signed distance of the pixel center to
    each edge in device pixels.
    """
    rows, cols = np.mgrid[0 : shape[0], 0 : shape[1]]
    x = cols + 0.5
    y = rows + 0.5
    coverage = np.ones(shape, dtype=np.float32)
    for index, extent in ((0, width), (1, height)):
        a, b, c = window[index]
        coord = a * x + b * y + c
        norm = math.hypot(a, b)
        near = np.clip(coord / norm + 0.5, 0.0, 1.0)
        far = np.clip((extent - coord) / norm + 0.5, 0.0, 1.0)
        coverage *= np.clip(near + far - 1.0, 0.0, 1.0).astype(np.float32)
    return np.expand_dims(coverage, 2)


class SurfaceProvider(object):
    """
    Scoped provider of offscreen surfaces.

    Released surfaces are pooled and reused for requests of the same size::

        provider = SurfaceProvider()
        with provider.surface(120, 80) as offscreen:
            ...

    :param max_pixels: largest surface area the provider agrees to allocate.
    :param pool_size: number of released surfaces kept for reuse.
    """

    def __init__(self, max_pixels: int = DEFAULT_MAX_PIXELS, pool_size: int = DEFAULT_POOL_SIZE):
        self.max_pixels = max_pixels
        self.pool_size = pool_size
        self.allocations = 0
        self.outstanding = 0
        self._pool: list[RasterSurface] = []

    def acquire(self, width: int, height: int) -> RasterSurface:
        """
        Return a cleared surface of the given size.

        :raises SurfaceAcquisitionFailure: when the size is empty or exceeds
            ``max_pixels``.
        """
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise SurfaceAcquisitionFailure("Empty surface size: %dx%d" % (width, height))
        if width * height > self.max_pixels:
            raise SurfaceAcquisitionFailure(
                "Surface %dx%d exceeds the %d pixel limit" % (width, height, self.max_pixels)
            )
        for index, surface in enumerate(self._pool):
            if surface.size == (width, height):
                del self._pool[index]
                surface.clear()
                break
        else:
            try:
                surface = RasterSurface(width, height)
            except MemoryError as e:
                raise SurfaceAcquisitionFailure(
                    "Cannot allocate %dx%d surface" % (width, height)
                ) from e
            self.allocations += 1
        self.outstanding += 1
        return surface

    def release(self, surface: RasterSurface) -> None:
        self.outstanding -= 1
        if len(self._pool) >= self.pool_size:
            self._pool.pop(0)
        self._pool.append(surface)

    @contextlib.contextmanager
    def surface(self, width: int, height: int) -> Iterator[RasterSurface]:
        """Acquire a surface and release it on every exit path."""
        surface = self.acquire(width, height)
        try:
            yield surface
        finally:
            self.release(surface)
