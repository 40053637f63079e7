"""
Texture loading.

:py:class:`TextureLoader` binds decoded textures to items. Cache hits bind
synchronously; misses are fetched and decoded on a worker pool and the
results are queued until the rendering thread calls
:py:meth:`TextureLoader.dispatch_pending`::

    loader = TextureLoader(BitmapCache(capacity=10))
    item = CompoundPath('M 0 0 h 100 v 50 h -100 z', loader=loader)
    item.texture_url = 'https://example.com/wood.png'
    ...
    loader.dispatch_pending()  # from the render loop

Each request carries a generation token. A completion whose token or URL
no longer matches the item's latest request is discarded.

Decoders are looked up by URL scheme in :py:data:`DECODERS`; plain file
paths, ``file:``, ``data:``, ``http:`` and ``https:`` URLs are supported.
"""

import base64
import concurrent.futures
import functools
import io
import logging
import queue
import threading
import time
import urllib.parse
import urllib.request
from typing import TYPE_CHECKING, Callable, Optional

import httpx
from PIL import Image

from texfill.cache import BitmapCache, BitmapResource
from texfill.constants import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_WORKERS
from texfill.errors import LoadFailure
from texfill.registry import new_registry

if TYPE_CHECKING:
    from texfill.api.protocols import Texturable

logger = logging.getLogger(__name__)

DECODERS, register = new_registry(attribute="schemes")


def _open_image(url: str, fp) -> BitmapResource:
    with Image.open(fp) as image:
        image.load()
        return BitmapResource.from_pil(url, image)


@register("", "file")
def decode_file(url: str) -> BitmapResource:
    """Decode a local file given as a path or a ``file:`` URL."""
    parsed = urllib.parse.urlparse(url)
    path = urllib.request.url2pathname(parsed.path) if parsed.scheme == "file" else url
    return _open_image(url, path)


@register("data")
def decode_data(url: str) -> BitmapResource:
    """Decode a ``data:`` URI."""
    header, sep, payload = url.partition(",")
    if not sep:
        raise LoadFailure(url, "malformed data URI")
    if header.endswith(";base64"):
        data = base64.b64decode(payload, validate=True)
    else:
        data = urllib.parse.unquote_to_bytes(payload)
    return _open_image(url, io.BytesIO(data))


@register("http", "https")
def decode_remote(url: str, timeout: float = DEFAULT_FETCH_TIMEOUT) -> BitmapResource:
    """Fetch and decode a remote image."""
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()
    return _open_image(url, io.BytesIO(response.content))


def decode(url: str) -> BitmapResource:
    """
    Fetch and decode ``url`` with the decoder registered for its scheme.

    :raises LoadFailure: on any fetch or decode error.
    """
    scheme = urllib.parse.urlparse(url).scheme.lower()
    if len(scheme) == 1:
        scheme = ""  # Windows drive letter.
    decoder = DECODERS.get(scheme)
    if decoder is None:
        raise LoadFailure(url, "unsupported scheme %r" % scheme)
    try:
        return decoder(url)
    except LoadFailure:
        raise
    except (OSError, ValueError, httpx.HTTPError, Image.DecompressionBombError) as e:
        raise LoadFailure(url, str(e)) from e


class TextureLoader(object):
    """
    Asynchronous texture loader backed by a shared :py:class:`BitmapCache`.

    :param cache: cache to read and populate; a new one is created if omitted.
    :param decoder: callable ``decoder(url) -> BitmapResource``.
    :param executor: executor running the decoder; a thread pool of
        ``max_workers`` threads is created on first use if omitted.
    :param max_workers: size of the default thread pool.
    """

    def __init__(
        self,
        cache: Optional[BitmapCache] = None,
        decoder: Callable[[str], BitmapResource] = decode,
        executor: Optional[concurrent.futures.Executor] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._cache = cache if cache is not None else BitmapCache()
        self._decoder = decoder
        self._executor = executor
        self._owns_executor = executor is None
        self._max_workers = max_workers
        self._completions: "queue.Queue[tuple]" = queue.Queue()
        self._pending = 0
        self._lock = threading.RLock()

    @property
    def cache(self) -> BitmapCache:
        return self._cache

    @property
    def pending(self) -> int:
        """Number of requests not yet dispatched."""
        with self._lock:
            return self._pending

    def request(self, shape: "Texturable", url: Optional[str]) -> None:
        """
        Bind the texture at ``url`` to ``shape``.

        A falsy ``url`` clears the texture. A cache hit binds synchronously
        and emits ``load`` before returning. A miss starts a background
        fetch and returns immediately; the previous texture stays bound
        until the new one is dispatched.
        """
        with self._lock:
            token = shape.begin_texture_request(url)
            if not url:
                shape.bind_texture(None)
                return
            resource = self._cache.get(url)
            if resource is not None:
                shape.bind_texture(resource)
                return
            shape.texture_pending()
            self._pending += 1
        logger.debug("Loading texture: %s" % url)
        try:
            future = self._get_executor().submit(self._decoder, url)
        except RuntimeError as e:
            future = concurrent.futures.Future()
            future.set_exception(LoadFailure(url, str(e)))
        future.add_done_callback(functools.partial(self._post, shape, url, token))

    def dispatch_pending(self, block: bool = False, timeout: Optional[float] = None) -> int:
        """
        Apply queued completions on the calling (rendering) thread.

        :param block: wait for at least one completion.
        :param timeout: maximum wait in seconds when blocking.
        :return: number of completions applied.
        """
        count = 0
        while True:
            try:
                item = self._completions.get(block=block and count == 0, timeout=timeout)
            except queue.Empty:
                return count
            self._complete(*item)
            count += 1

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every request is settled and dispatched.

        :return: ``False`` if the timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self.pending:
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
            self.dispatch_pending(block=True, timeout=remaining)
        return True

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> "TextureLoader":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    def _get_executor(self) -> concurrent.futures.Executor:
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="texfill-loader"
            )
        return self._executor

    def _post(self, shape: "Texturable", url: str, token: int, future: concurrent.futures.Future) -> None:
        # Runs on a worker thread; state is only touched by dispatch_pending().
        self._completions.put((shape, url, token, future))

    def _complete(self, shape: "Texturable", url: str, token: int, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._pending -= 1
            if future.cancelled():
                logger.debug("Texture request cancelled: %s" % url)
                return
            error = future.exception()
            resource = None
            if error is None:
                resource = future.result()
                self._cache.put(url, resource)
            elif not isinstance(error, LoadFailure):
                error = LoadFailure(url, str(error))

            if not shape.is_current_request(url, token):
                logger.debug("Discarding superseded texture: %s" % url)
                return
            if error is not None:
                logger.warning("%s" % error)
                shape.texture_failed(error)
            else:
                shape.bind_texture(resource)
