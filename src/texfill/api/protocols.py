"""
Capability interfaces of drawable items.

Concrete items compose these capabilities instead of inheriting them from a
deep class chain. The compositor only needs :py:class:`Silhouette`, the
loader only needs :py:class:`Texturable`.
"""

from typing import Optional, Protocol, runtime_checkable

from texfill.api.style import Style
from texfill.cache import BitmapResource
from texfill.errors import LoadFailure
from texfill.render.surface import RasterSurface
from texfill.settings import TextureSettings

Rect = tuple[float, float, float, float]


@runtime_checkable
class Drawable(Protocol):
    """Something that paints itself onto a surface."""

    def draw(self, surface: RasterSurface) -> None: ...


@runtime_checkable
class Styled(Protocol):
    """Something carrying a paint style."""

    @property
    def style(self) -> Style: ...


@runtime_checkable
class Silhouette(Protocol):
    """
    Shape whose fill establishes the clip of a textured fill.

    ``bounds`` is ``(x, y, width, height)`` in the coordinates the fill and
    stroke methods paint in.
    """

    @property
    def bounds(self) -> Rect: ...

    def fill(self, surface: RasterSurface, style: Style) -> None: ...

    def stroke(self, surface: RasterSurface, style: Style) -> None: ...


@runtime_checkable
class Texturable(Protocol):
    """
    Item that can be bound to a texture by
    :py:class:`~texfill.loader.TextureLoader`.
    """

    @property
    def texture_settings(self) -> Optional[TextureSettings]: ...

    @property
    def resource(self) -> Optional[BitmapResource]: ...

    @property
    def loaded(self) -> bool: ...

    def begin_texture_request(self, url: Optional[str]) -> int:
        """Record ``url`` as the desired texture and return a new token."""
        ...

    def is_current_request(self, url: str, token: int) -> bool: ...

    def texture_pending(self) -> None: ...

    def bind_texture(self, resource: Optional[BitmapResource]) -> None: ...

    def texture_failed(self, error: LoadFailure) -> None: ...
