"""
Path geometry.

A :py:class:`Path` is a list of :py:class:`Subpath` objects, each made of
straight and cubic Bezier segments. Paths can be built programmatically or
from SVG path data::

    path = Path.from_data('M 0 0 L 100 0 L 100 50 Z M 20 10 h 20 v 20 h -20 z')
    path.bounds  # (x, y, width, height)

Boolean path geometry is not handled here; overlapping subpaths are
resolved at raster time through the fill rule.
"""

import logging
import re
from typing import Iterable, Iterator, Optional, Sequence

import numpy as np
from attrs import define, field

from texfill.render.utils import transform_points

logger = logging.getLogger(__name__)

#: Bezier approximation constant for quarter circles.
KAPPA = 0.5522847498307936

#: Samples per cubic segment for bounds and area estimates.
CURVE_SAMPLES = 16

Point = tuple[float, float]
Rect = tuple[float, float, float, float]


def _point(value: Sequence[float]) -> Point:
    return (float(value[0]), float(value[1]))


@define(frozen=True)
class Segment:
    """
    Path segment ending at ``end``.

    Line segments have no control points; cubic segments have two.
    """

    end: Point = field(converter=_point)
    control1: Optional[Point] = field(default=None)
    control2: Optional[Point] = field(default=None)

    @property
    def is_curve(self) -> bool:
        return self.control1 is not None

    def points(self) -> list[Point]:
        if self.is_curve:
            return [self.control1, self.control2, self.end]  # type: ignore[list-item]
        return [self.end]


@define
class Subpath:
    """
    Connected run of segments starting at ``start``.
    """

    start: Point = field(converter=_point)
    segments: list[Segment] = field(factory=list)
    closed: bool = False

    def line_to(self, x: float, y: float) -> "Subpath":
        self.segments.append(Segment((x, y)))
        return self

    def curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> "Subpath":
        self.segments.append(Segment((x, y), (float(x1), float(y1)), (float(x2), float(y2))))
        return self

    def close(self) -> "Subpath":
        self.closed = True
        return self

    @property
    def current_point(self) -> Point:
        return self.segments[-1].end if self.segments else self.start

    def __len__(self) -> int:
        return len(self.segments) + 1

    def transformed(self, matrix: np.ndarray) -> "Subpath":
        """Return a copy with every point mapped through ``matrix``."""

        def _map(p):
            return None if p is None else tuple(transform_points(matrix, [p])[0])

        return Subpath(
            _map(self.start),
            [Segment(_map(s.end), _map(s.control1), _map(s.control2)) for s in self.segments],
            self.closed,
        )

    def flatten(self, samples: int = CURVE_SAMPLES) -> np.ndarray:
        """Polyline approximation as an (N, 2) array."""
        points = [self.start]
        current = self.start
        t = np.linspace(0.0, 1.0, samples + 1)[1:, None]
        for segment in self.segments:
            if segment.is_curve:
                p0, p1, p2, p3 = (
                    np.array(current),
                    np.array(segment.control1),
                    np.array(segment.control2),
                    np.array(segment.end),
                )
                curve = (
                    (1 - t) ** 3 * p0
                    + 3 * (1 - t) ** 2 * t * p1
                    + 3 * (1 - t) * t**2 * p2
                    + t**3 * p3
                )
                points.extend(tuple(p) for p in curve)
            else:
                points.append(segment.end)
            current = segment.end
        return np.array(points, dtype=np.float64)

    def signed_area(self) -> float:
        """Shoelace area of the flattened, implicitly closed outline."""
        poly = self.flatten()
        x, y = poly[:, 0], poly[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))

    def symbol(self) -> Iterator:
        """Sequence generator for SVG path data."""
        yield "M"
        yield from self.start
        for segment in self.segments:
            if segment.is_curve:
                yield "C"
                yield from segment.control1  # type: ignore[misc]
                yield from segment.control2  # type: ignore[misc]
            else:
                yield "L"
            yield from segment.end
        if self.closed:
            yield "Z"

    def to_data(self) -> str:
        return " ".join("%g" % x if isinstance(x, float) else x for x in self.symbol())


class Path(object):
    """
    Ordered collection of subpaths forming one shape.
    """

    def __init__(self, subpaths: Optional[Iterable[Subpath]] = None):
        self._subpaths = list(subpaths or [])

    @classmethod
    def from_data(cls, data: str) -> "Path":
        """Parse SVG path data (``M L H V C Z``, absolute and relative)."""
        return cls(_parse_path_data(data))

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float) -> "Path":
        subpath = Subpath((x, y))
        subpath.line_to(x + width, y).line_to(x + width, y + height).line_to(x, y + height)
        return cls([subpath.close()])

    @classmethod
    def ellipse(cls, cx: float, cy: float, rx: float, ry: float) -> "Path":
        kx, ky = rx * KAPPA, ry * KAPPA
        subpath = Subpath((cx + rx, cy))
        subpath.curve_to(cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry)
        subpath.curve_to(cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy)
        subpath.curve_to(cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry)
        subpath.curve_to(cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy)
        return cls([subpath.close()])

    @property
    def subpaths(self) -> list[Subpath]:
        return self._subpaths

    def add(self, *subpaths: Subpath) -> None:
        self._subpaths.extend(subpaths)

    def extend(self, other: "Path") -> None:
        self._subpaths.extend(other.subpaths)

    def transformed(self, matrix: np.ndarray) -> "Path":
        return Path(subpath.transformed(matrix) for subpath in self._subpaths)

    @property
    def bounds(self) -> Rect:
        """Bounding box ``(x, y, width, height)``; zero size when empty."""
        polys = [s.flatten() for s in self._subpaths]
        if not polys:
            return (0.0, 0.0, 0.0, 0.0)
        points = np.concatenate(polys)
        x0, y0 = points.min(axis=0)
        x1, y1 = points.max(axis=0)
        return (float(x0), float(y0), float(x1 - x0), float(y1 - y0))

    def is_empty(self) -> bool:
        return not self._subpaths

    def to_data(self) -> str:
        return " ".join(s.to_data() for s in self._subpaths)

    def __iter__(self) -> Iterator[Subpath]:
        return iter(self._subpaths)

    def __len__(self) -> int:
        return len(self._subpaths)

    def __getitem__(self, index: int) -> Subpath:
        return self._subpaths[index]

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.to_data())


_TOKEN = re.compile(r"[MmLlHhVvCcZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Z": 0}


def _parse_path_data(data: str) -> list[Subpath]:
    tokens = _TOKEN.findall(data)
    subpaths: list[Subpath] = []
    current: Optional[Subpath] = None
    command = None
    x = y = 0.0
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.isalpha():
            command = token
            index += 1
        elif command is None:
            raise ValueError("Path data must start with a command: %r" % data)
        upper = command.upper()
        relative = command != upper
        arity = _ARITY[upper]
        if upper == "Z":
            if current is not None:
                current.close()
                x, y = current.start
                current = None
            command = None
            continue
        args = tokens[index : index + arity]
        if len(args) < arity or any(a.isalpha() for a in args):
            raise ValueError("Incomplete %s command in path data: %r" % (command, data))
        values = [float(a) for a in args]
        index += arity
        if upper == "M":
            x, y = (x + values[0], y + values[1]) if relative else tuple(values)
            current = Subpath((x, y))
            subpaths.append(current)
            # Extra coordinate pairs after a moveto are implicit linetos.
            command = "l" if relative else "L"
            continue
        if current is None:
            current = Subpath((x, y))
            subpaths.append(current)
        if upper == "L":
            x, y = (x + values[0], y + values[1]) if relative else tuple(values)
            current.line_to(x, y)
        elif upper == "H":
            x = x + values[0] if relative else values[0]
            current.line_to(x, y)
        elif upper == "V":
            y = y + values[0] if relative else values[0]
            current.line_to(x, y)
        elif upper == "C":
            if relative:
                values = [v + (x if i % 2 == 0 else y) for i, v in enumerate(values)]
            current.curve_to(*values)
            x, y = values[4], values[5]
    return subpaths
