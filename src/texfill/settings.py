"""
Texture placement settings.

:py:class:`TextureSettings` is an immutable value object. Items receive it
wholesale, either as an instance or as the mapping accepted by
:py:meth:`TextureSettings.from_dict`::

    settings = TextureSettings.from_dict({
        'syncRatio': True,
        'scaling': 1.5,
        'horizontalFlip': True,
        'rotation': 30,
    })

Keys may be camelCase or snake_case. Unrecognized keys are ignored.
"""

import logging
from typing import Any, Mapping, Optional, Union

from attrs import define, field, fields

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


_TRUE_STRINGS = frozenset(("true", "yes", "on", "1"))
_FALSE_STRINGS = frozenset(("false", "no", "off", "0", ""))


def _flag(value: Any) -> bool:
    """Convert a flag, parsing strings such as ``"false"``."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError("Invalid flag value: %r" % (value,))
    return bool(value)


_KEY_ALIASES = {
    "scaling": "scaling",
    "scalingX": "scaling_x",
    "scalingY": "scaling_y",
    "syncRatio": "sync_ratio",
    "offsetLeft": "offset_left",
    "offsetTop": "offset_top",
    "leftPosition": "left_position",
    "topPosition": "top_position",
    "horizontalFlip": "horizontal_flip",
    "verticalFlip": "vertical_flip",
    "rotation": "rotation",
    "textWidth": "text_width",
    "textHeight": "text_height",
}


@define(frozen=True)
class TextureSettings:
    """
    User-configurable placement of a texture inside its silhouette.

    Unset numeric values are ``None``; the fit calculator applies defaults
    (``1`` for scaling factors, ``0`` for offsets and positions).

    .. py:attribute:: scaling

        Uniform scale factor, used when ``sync_ratio`` is set.

    .. py:attribute:: scaling_x
    .. py:attribute:: scaling_y

        Independent scale factors, used when ``sync_ratio`` is not set.

    .. py:attribute:: offset_left
    .. py:attribute:: offset_top

        Shift of the texture origin towards the top-left, in user units.

    .. py:attribute:: left_position
    .. py:attribute:: top_position

        Position nudge. ``top_position`` moves the texture up.

    .. py:attribute:: rotation

        Rotation in degrees about the center of the fitted texture.

    .. py:attribute:: text_width
    .. py:attribute:: text_height

        Explicit extents replacing the silhouette box for cover fitting.
    """

    scaling: Optional[float] = field(default=None, converter=_optional_float)
    scaling_x: Optional[float] = field(default=None, converter=_optional_float)
    scaling_y: Optional[float] = field(default=None, converter=_optional_float)
    sync_ratio: bool = field(default=False, converter=_flag)
    offset_left: Optional[float] = field(default=None, converter=_optional_float)
    offset_top: Optional[float] = field(default=None, converter=_optional_float)
    left_position: Optional[float] = field(default=None, converter=_optional_float)
    top_position: Optional[float] = field(default=None, converter=_optional_float)
    horizontal_flip: bool = field(default=False, converter=_flag)
    vertical_flip: bool = field(default=False, converter=_flag)
    rotation: Optional[float] = field(default=None, converter=_optional_float)
    text_width: Optional[float] = field(default=None, converter=_optional_float)
    text_height: Optional[float] = field(default=None, converter=_optional_float)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TextureSettings":
        """Build settings from a configuration mapping."""
        if data is None:
            return cls()
        names = {a.name for a in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in names:
                logger.debug("Ignoring unknown texture setting: %s" % key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase mapping of explicitly set values."""
        result = {}
        for key, name in _KEY_ALIASES.items():
            value = getattr(self, name)
            if value is None or value is False:
                continue
            result[key] = value
        return result


def coerce_settings(
    value: Union[TextureSettings, Mapping[str, Any], None],
) -> Optional[TextureSettings]:
    """Accept settings, a mapping or ``None``."""
    if value is None or isinstance(value, TextureSettings):
        return value
    if isinstance(value, Mapping):
        return TextureSettings.from_dict(value)
    raise TypeError("Invalid texture settings: %r" % (value,))
