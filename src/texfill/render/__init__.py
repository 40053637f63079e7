"""
Raster back-end.

This subpackage provides the drawing context the texture compositor paints
into: NumPy float32 surfaces with canvas-like state, Porter-Duff
compositing operators, path and glyph rasterization, and the offscreen
texture compositor itself.

**Note**: Rasterization requires optional dependencies. Install with::

    pip install 'texfill[composite]'

The composite extra includes:

- ``aggdraw``: path and bezier curve rasterization
- ``scikit-image``: affine image resampling
- ``scipy``: shadow blur

Key modules:

- :py:mod:`texfill.render.surface`: drawing surfaces and offscreen provider
- :py:mod:`texfill.render.blend`: compositing operators
- :py:mod:`texfill.render.vector`: fill and stroke coverage masks
- :py:mod:`texfill.render.text`: glyph run masks
- :py:mod:`texfill.render.compositor`: offscreen textured fill
"""

from texfill.render.compositor import composite_textured_fill, stabilization_margin
from texfill.render.surface import RasterSurface, SurfaceProvider

__all__ = [
    "RasterSurface",
    "SurfaceProvider",
    "composite_textured_fill",
    "stabilization_margin",
]
