import logging

import numpy as np
import pytest

from texfill.constants import CompositeOperation
from texfill.render.blend import OPERATORS, source_atop, source_over

logger = logging.getLogger(__name__)


def _pixel(color, alpha):
    return (
        np.array(color, dtype=np.float32).reshape(1, 1, 3),
        np.array(alpha, dtype=np.float32).reshape(1, 1, 1),
    )


def test_operators_registered():
    assert set(OPERATORS) == set(CompositeOperation)


@pytest.mark.parametrize(
    "backdrop, source, expected",
    [
        (((1, 0, 0), 1.0), ((0, 0, 1), 1.0), ((0, 0, 1), 1.0)),
        (((1, 0, 0), 1.0), ((0, 0, 1), 0.0), ((1, 0, 0), 1.0)),
        (((1, 0, 0), 0.0), ((0, 0, 1), 0.5), ((0, 0, 1), 0.5)),
        (((1, 0, 0), 1.0), ((0, 0, 1), 0.5), ((0.5, 0, 0.5), 1.0)),
        (((0, 0, 0), 0.0), ((0, 0, 0), 0.0), ((0, 0, 0), 0.0)),
    ],
)
def test_source_over(backdrop, source, expected):
    C, A = source_over(*_pixel(*backdrop), *_pixel(*source))
    assert np.allclose(C, _pixel(*expected)[0])
    assert np.allclose(A, _pixel(*expected)[1])


@pytest.mark.parametrize("backdrop_alpha", [0.0, 0.25, 1.0])
def test_source_atop_keeps_backdrop_alpha(backdrop_alpha):
    C, A = source_atop(*_pixel((1, 0, 0), backdrop_alpha), *_pixel((0, 1, 0), 1.0))
    assert np.allclose(A, backdrop_alpha)
    assert np.allclose(C, _pixel((0, 1, 0), 1.0)[0])


def test_source_atop_partial_source():
    C, A = source_atop(*_pixel((1, 0, 0), 1.0), *_pixel((0, 1, 0), 0.25))
    assert np.allclose(A, 1.0)
    assert np.allclose(C, _pixel((0.75, 0.25, 0), 1.0)[0])
