"""Compatibility module for optional raster dependencies."""

import functools
from typing import Callable, TYPE_CHECKING, TypeVar

F = TypeVar("F", bound=Callable)

if TYPE_CHECKING:
    import aggdraw  # type: ignore[import-not-found]
    from scipy import ndimage  # type: ignore[import-untyped]
    from skimage import transform  # type: ignore[import-untyped]

try:
    import aggdraw  # noqa: F401  # type: ignore[import-not-found,no-redef]

    HAS_AGGDRAW = True
except ImportError:
    HAS_AGGDRAW = False

try:
    from scipy import ndimage  # noqa: F401  # type: ignore[import-untyped,no-redef]

    HAS_SCIPY = True
except ImportError:
    HAS_SCIPY = False

try:
    from skimage import transform  # noqa: F401  # type: ignore[import-untyped,no-redef]

    HAS_SKIMAGE = True
except ImportError:
    HAS_SKIMAGE = False


def _requires(available: bool, purpose: str, package: str) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not available:
                raise ImportError(
                    "%s requires: %s\n\n"
                    "Install with:\n"
                    "    pip install 'texfill[composite]'\n"
                    "Or:\n"
                    "    pip install %s" % (purpose, package, package)
                )
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def require_aggdraw(func: F) -> F:
    """
    Decorator to check if aggdraw is available before calling the function.

    Required for path rasterization (fills and strokes).

    Raises:
        ImportError: If aggdraw is not installed.
    """
    return _requires(HAS_AGGDRAW, "Path rasterization", "aggdraw")(func)


def require_scipy(func: F) -> F:
    """
    Decorator to check if scipy is available before calling the function.

    Required for shadow blur.

    Raises:
        ImportError: If scipy is not installed.
    """
    return _requires(HAS_SCIPY, "Shadow rendering", "scipy")(func)


def require_skimage(func: F) -> F:
    """
    Decorator to check if scikit-image is available before calling the function.

    Required for image resampling (texture and offscreen draws).

    Raises:
        ImportError: If scikit-image is not installed.
    """
    return _requires(HAS_SKIMAGE, "Image resampling", "scikit-image")(func)
