"""Pytest configuration for texfill tests."""

from typing import Any

import numpy as np
import pytest

from texfill.cache import BitmapResource


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "composite: mark test as requiring composite dependencies (aggdraw, scipy, scikit-image)",
    )


# Check if composite dependencies are available
try:
    import aggdraw  # noqa: F401 # type: ignore
    import scipy  # noqa: F401 # type: ignore
    import skimage  # noqa: F401

    HAS_COMPOSITE = True
except ImportError:
    HAS_COMPOSITE = False


def pytest_collection_modifyitems(config: Any, items: list) -> None:
    if HAS_COMPOSITE:
        return
    skip = pytest.mark.skip(
        reason="Requires composite dependencies: pip install 'texfill[composite]'"
    )
    for item in items:
        if "composite" in item.keywords:
            item.add_marker(skip)


def make_resource(url: str = "mem://texture", width: int = 4, height: int = 2) -> BitmapResource:
    """Opaque texture whose left half is red and right half is blue."""
    pixels = np.zeros((height, width, 4), dtype=np.float32)
    pixels[:, : width // 2, 0] = 1.0
    pixels[:, width // 2 :, 2] = 1.0
    pixels[..., 3] = 1.0
    return BitmapResource(url, pixels)


@pytest.fixture
def resource() -> BitmapResource:
    return make_resource()


@pytest.fixture
def resource_factory():
    return make_resource
