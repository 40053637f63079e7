"""
texfill: texture fills for vector shapes and text.

Shapes and text runs are filled with a bitmap instead of a flat color. The
texture is fitted to the silhouette (cover fit with optional scaling,
offsets, flips and rotation) and composited on an offscreen surface so it
never bleeds outside the shape.

Basic usage::

    from texfill import BitmapCache, CompoundPath, RasterSurface, TextureLoader

    loader = TextureLoader(BitmapCache(capacity=10))
    shape = CompoundPath('M 10 10 h 180 v 80 h -180 z', loader=loader)
    shape.texture_url = 'wood.png'
    loader.wait()

    surface = RasterSurface(200, 100)
    shape.draw(surface)
    surface.to_pil().save('out.png')

Architecture:

- :py:mod:`texfill.cache`: LRU cache of decoded bitmaps
- :py:mod:`texfill.loader`: asynchronous fetch and decode
- :py:mod:`texfill.fit`: texture fitting geometry
- :py:mod:`texfill.render`: raster surfaces and offscreen compositing
- :py:mod:`texfill.api`: textured items (compound paths, point text)
"""

from texfill.api import CompoundPath, Path, PointText, Style
from texfill.cache import BitmapCache, BitmapResource
from texfill.fit import compute_fit
from texfill.loader import TextureLoader
from texfill.render import RasterSurface, SurfaceProvider
from texfill.settings import TextureSettings
from texfill.version import __version__

__all__ = [
    "BitmapCache",
    "BitmapResource",
    "CompoundPath",
    "Path",
    "PointText",
    "RasterSurface",
    "Style",
    "SurfaceProvider",
    "TextureLoader",
    "TextureSettings",
    "compute_fit",
    "__version__",
]
