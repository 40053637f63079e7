"""
Textured item adapters.

:py:class:`CompoundPath` fills a multi-subpath shape and
:py:class:`PointText` fills anchored lines of text. Both are flat-filled
until a texture is bound, and textured through the offscreen compositor
afterwards::

    loader = TextureLoader(BitmapCache())
    shape = CompoundPath(
        'M 0 0 h 120 v 80 h -120 z M 30 20 h 60 v 40 h -60 z',
        style=Style(fill_color='black', fill_rule='evenodd'),
        loader=loader,
    )
    shape.on('load', lambda event: print('loaded', event.url))
    shape.texture_url = 'textures/wood.png'
    shape.texture_settings = {'syncRatio': True, 'scaling': 1.2}
    loader.wait()
    shape.draw(surface)
"""

import logging
import re
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from attrs import define

from texfill.api.layout import TextLayout
from texfill.api.path import Path, Subpath
from texfill.api.protocols import Silhouette
from texfill.api.style import Style
from texfill.cache import BitmapResource
from texfill.constants import Change, TextureEvent
from texfill.errors import DegenerateGeometry, LoadFailure
from texfill.fit import compute_fit
from texfill.render.compositor import composite_textured_fill
from texfill.render.surface import RasterSurface, SurfaceProvider
from texfill.settings import TextureSettings, coerce_settings

logger = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]


@define(frozen=True)
class TextureEventData:
    """Payload passed to ``load`` and ``error`` callbacks."""

    type: TextureEvent
    target: Any
    url: Optional[str]
    error: Optional[LoadFailure] = None


class TexturedShape(object):
    """
    Texture state shared by item adapters.

    :param style: paint style; a default black fill when omitted.
    :param loader: :py:class:`~texfill.loader.TextureLoader` used when
        ``texture_url`` is assigned.
    :param texture_settings: initial settings or settings mapping.
    :param provider: offscreen surface provider for textured draws.
    :param supersample: extra resolution of the offscreen pass.
    """

    def __init__(
        self,
        style: Optional[Style] = None,
        loader=None,
        texture_settings: Union[TextureSettings, Mapping[str, Any], None] = None,
        provider: Optional[SurfaceProvider] = None,
        supersample: float = 1.0,
    ):
        self._style = style or Style()
        self._loader = loader
        self._settings = coerce_settings(texture_settings)
        self._texture_url: Optional[str] = None
        self._resource: Optional[BitmapResource] = None
        self._loaded = False
        self._generation = 0
        self._view: Any = None
        self._handlers: dict[TextureEvent, list[Callable]] = {}
        self.on_changed: Optional[Callable[[Any, Change], None]] = None
        self.provider = provider
        self.supersample = supersample

    @property
    def style(self) -> Style:
        return self._style

    @style.setter
    def style(self, value: Style) -> None:
        self._style = value
        self._changed(Change.STYLE)

    @property
    def texture_url(self) -> Optional[str]:
        """URL of the requested texture, ``None`` for a flat fill."""
        return self._texture_url

    @texture_url.setter
    def texture_url(self, url: Optional[str]) -> None:
        if self._loader is None:
            raise ValueError("%s has no texture loader" % self.__class__.__name__)
        self._loader.request(self, url or None)

    @property
    def texture_settings(self) -> Optional[TextureSettings]:
        return self._settings

    @texture_settings.setter
    def texture_settings(self, value: Union[TextureSettings, Mapping[str, Any], None]) -> None:
        self._settings = coerce_settings(value)
        self._changed(Change.STYLE)

    @property
    def resource(self) -> Optional[BitmapResource]:
        """Bound texture; may lag behind ``texture_url`` while loading."""
        return self._resource

    @property
    def loaded(self) -> bool:
        return self._loaded

    @loaded.setter
    def loaded(self, value: bool) -> None:
        self._loaded = bool(value)

    # Attachment and events.

    @property
    def view(self) -> Any:
        return self._view

    def attach(self, view: Any) -> None:
        """Attach to a view; events are only delivered while attached."""
        self._view = view

    def detach(self) -> None:
        self._view = None

    def on(self, event: Union[str, TextureEvent], callback: Callable) -> None:
        self._handlers.setdefault(TextureEvent(event), []).append(callback)

    def off(self, event: Union[str, TextureEvent], callback: Optional[Callable] = None) -> None:
        event = TextureEvent(event)
        if callback is None:
            self._handlers.pop(event, None)
        elif callback in self._handlers.get(event, []):
            self._handlers[event].remove(callback)

    def responds(self, event: Union[str, TextureEvent]) -> bool:
        return bool(self._handlers.get(TextureEvent(event)))

    def emit(self, event: TextureEvent, error: Optional[LoadFailure] = None) -> None:
        if self._view is None or not self.responds(event):
            return
        data = TextureEventData(event, self, self._texture_url, error)
        for callback in list(self._handlers[event]):
            callback(data)

    def _changed(self, flags: Change) -> None:
        if self.on_changed is not None:
            self.on_changed(self, flags)

    # Loader hooks.

    def begin_texture_request(self, url: Optional[str]) -> int:
        self._texture_url = url
        self._generation += 1
        return self._generation

    def is_current_request(self, url: str, token: int) -> bool:
        return token == self._generation and url == self._texture_url

    def texture_pending(self) -> None:
        self._loaded = False
        self._changed(Change.STYLE)

    def bind_texture(self, resource: Optional[BitmapResource]) -> None:
        self._resource = resource
        self._loaded = True
        self._changed(Change.STYLE)
        if resource is not None:
            self.emit(TextureEvent.LOAD)

    def texture_failed(self, error: LoadFailure) -> None:
        self._loaded = True
        self.emit(TextureEvent.ERROR, error)

    # Drawing.

    def draw(self, surface: RasterSurface) -> None:
        raise NotImplementedError

    def _draw_textured(
        self,
        surface: RasterSurface,
        silhouette: Silhouette,
        box: Rect,
        origin: Optional[tuple[float, float]] = None,
    ) -> bool:
        """Composite the bound texture fitted to ``box`` into ``silhouette``."""
        resource = self._resource
        if resource is None:
            return False
        try:
            fit = compute_fit(box[2], box[3], resource.aspect_ratio, self._settings)
        except DegenerateGeometry as e:
            logger.debug("Skipping textured fill: %s" % e)
            return False
        return composite_textured_fill(
            surface,
            silhouette,
            resource,
            fit,
            self._style,
            provider=self.provider,
            supersample=self.supersample,
            rotation=self._settings.rotation if self._settings else None,
            origin=origin,
        )


class CompoundPath(TexturedShape):
    """
    Region adapter: a shape made of one or more subpaths.

    All subpaths are filled together, so overlaps resolve through the fill
    rule before texturing.

    :param path: :py:class:`~texfill.api.path.Path`, SVG path data or an
        iterable of :py:class:`~texfill.api.path.Subpath`.
    """

    def __init__(self, path: Union[Path, str, Iterable[Subpath], None] = None, **kwargs):
        super().__init__(**kwargs)
        if path is None:
            path = Path()
        elif isinstance(path, str):
            path = Path.from_data(path)
        elif not isinstance(path, Path):
            path = Path(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @path.setter
    def path(self, value: Union[Path, str]) -> None:
        self._path = Path.from_data(value) if isinstance(value, str) else value
        self._changed(Change.GEOMETRY)

    @property
    def children(self) -> list[Subpath]:
        return self._path.subpaths

    def add_children(self, *subpaths: Subpath) -> None:
        self._path.add(*subpaths)
        self._changed(Change.GEOMETRY)

    @property
    def bounds(self) -> Rect:
        return self._path.bounds

    def is_empty(self) -> bool:
        return self._path.is_empty()

    def fill(self, surface: RasterSurface, style: Style) -> None:
        surface.fill_path(self._path, style)

    def stroke(self, surface: RasterSurface, style: Style) -> None:
        surface.stroke_path(self._path, style)

    def draw(self, surface: RasterSurface) -> None:
        if self.is_empty():
            return
        style = self._style
        with surface.saved():
            surface.shadow = style.shadow
            if self._draw_textured(surface, self, self.bounds):
                return
            self.fill(surface, style)
            surface.shadow = None
            self.stroke(surface, style)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self._path.to_data())


_LINE_BREAK = re.compile(r"\r\n|\n|\r")


class PointText(TexturedShape):
    """
    Line-run adapter: text anchored at ``point``.

    Each line is textured in its own offscreen pass, so each line is
    justified independently. The texture is fitted to the whole text block
    and anchored at the top-left corner of each line box, so every line
    starts at the same texture offset.

    :param point: baseline anchor of the first line.
    :param content: text, lines separated by any line break.
    """

    def __init__(self, point: tuple[float, float] = (0.0, 0.0), content: str = "", **kwargs):
        super().__init__(**kwargs)
        self._point = (float(point[0]), float(point[1]))
        self._content = ""
        self._lines: list[str] = []
        self.content = content

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: Any) -> None:
        self._content = str(value)
        self._lines = _LINE_BREAK.split(self._content) if self._content else []
        self._changed(Change.CONTENT)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def point(self) -> tuple[float, float]:
        return self._point

    @point.setter
    def point(self, value: tuple[float, float]) -> None:
        self._point = (float(value[0]), float(value[1]))
        self._changed(Change.GEOMETRY)

    def is_empty(self) -> bool:
        return not self._content

    @property
    def layout(self) -> TextLayout:
        return TextLayout(self._style)

    @property
    def bounds(self) -> Rect:
        """Block bounds in surface coordinates."""
        x, y, width, height = self.layout.block_bounds(self._lines)
        return (x + self._point[0], y + self._point[1], width, height)

    def draw(self, surface: RasterSurface) -> None:
        if self.is_empty():
            return
        style = self._style
        layout = self.layout
        leading = layout.leading
        block = layout.block_bounds(self._lines)
        with surface.saved():
            surface.translate(*self._point)
            surface.shadow = style.shadow
            for line in self._lines:
                run = layout.run(line)
                origin = (run.bounds[0], block[1])
                if not self._draw_textured(surface, run, block, origin):
                    with surface.saved():
                        run.fill(surface, style)
                        surface.shadow = None
                        run.stroke(surface, style)
                surface.translate(0, leading)

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self._content)
