"""
Exceptions raised inside the texture-fill pipeline.

None of these is fatal: the compositor, the item adapters and the loader
recover from each of them by drawing without the texture.
"""


class TextureError(Exception):
    """Base class for texture-fill errors."""


class LoadFailure(TextureError):
    """Fetching or decoding a texture failed."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = "Failed to load texture %r" % url
        if reason:
            message += ": %s" % reason
        super().__init__(message)


class DegenerateGeometry(TextureError, ValueError):
    """Fitted texture or target box has no area."""


class SurfaceAcquisitionFailure(TextureError):
    """An offscreen surface could not be allocated."""
