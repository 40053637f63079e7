"""
Bitmap resource cache.

Decoded textures are shared between every item that references the same
URL. The cache keeps at most ``capacity`` of them and evicts the least
recently used entry before inserting a new one::

    cache = BitmapCache(capacity=10)
    cache.put(url, resource)
    resource = cache.get(url)  # also refreshes recency

The cache does no I/O; :py:class:`~texfill.loader.TextureLoader` fills it.
"""

import itertools
import logging
import threading
from collections import OrderedDict
from typing import Iterator, Optional

import numpy as np
from attrs import define, evolve, field
from PIL import Image

from texfill.constants import DEFAULT_CACHE_CAPACITY

logger = logging.getLogger(__name__)


def _as_rgba(pixels: np.ndarray) -> np.ndarray:
    pixels = np.array(pixels, dtype=np.float32)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError("Expected (height, width, 4) pixels, got %r" % (pixels.shape,))
    pixels.setflags(write=False)
    return pixels


@define(frozen=True, eq=False)
class BitmapResource:
    """
    Decoded texture.

    ``pixels`` is a read-only float32 array of shape ``(height, width, 4)``
    holding non-premultiplied RGBA values in ``[0, 1]``.
    """

    url: str
    pixels: np.ndarray = field(converter=_as_rgba, repr=False)

    @classmethod
    def from_pil(cls, url: str, image: Image.Image) -> "BitmapResource":
        """Create a resource from a PIL image of any mode."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(url, np.asarray(image, dtype=np.float32) / 255.0)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height if self.height else 0.0


@define(frozen=True)
class CacheEntry:
    """Cache slot: resource with its recency marker."""

    url: str
    resource: BitmapResource
    recency: int


class BitmapCache(object):
    """
    Capacity-bounded LRU store of :py:class:`BitmapResource`.

    All operations take an internal lock, so a cache can be shared by a
    render thread and loader callbacks.

    :param capacity: maximum number of resident resources.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY):
        if capacity < 1:
            raise ValueError("Cache capacity must be positive: %d" % capacity)
        self._capacity = capacity
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._clock = itertools.count()
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, url: str) -> Optional[BitmapResource]:
        """Return the cached resource for ``url`` and mark it recently used."""
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            self._entries[url] = evolve(entry, recency=next(self._clock))
            self._entries.move_to_end(url)
            logger.debug("Cache hit: %s" % url)
            return entry.resource

    def put(self, url: str, resource: BitmapResource) -> None:
        """Insert ``resource``, evicting least recently used entries first."""
        with self._lock:
            self._entries.pop(url, None)
            while len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evict: %s" % evicted)
            self._entries[url] = CacheEntry(url, resource, next(self._clock))

    def has(self, url: str) -> bool:
        """Membership test that leaves recency untouched."""
        with self._lock:
            return url in self._entries

    def entry(self, url: str) -> Optional[CacheEntry]:
        """Return the raw entry without refreshing recency."""
        with self._lock:
            return self._entries.get(url)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def urls(self) -> list[str]:
        """Resident URLs, least recently used first."""
        with self._lock:
            return list(self._entries)

    def size(self) -> int:
        return len(self)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.urls())

    def __repr__(self) -> str:
        return "%s(capacity=%d, size=%d)" % (
            self.__class__.__name__,
            self._capacity,
            len(self),
        )
