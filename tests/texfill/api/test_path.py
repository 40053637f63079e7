import numpy as np
import pytest

from texfill.api.path import Path, Subpath
from texfill.render.utils import scale_matrix


def test_from_data_absolute():
    path = Path.from_data("M 0 0 L 100 0 L 100 50 Z M 20 10 L 40 10 L 40 30 Z")
    assert len(path) == 2
    assert path[0].start == (0.0, 0.0)
    assert [s.end for s in path[0].segments] == [(100.0, 0.0), (100.0, 50.0)]
    assert path[0].closed
    assert path.bounds == (0.0, 0.0, 100.0, 50.0)


def test_from_data_relative():
    path = Path.from_data("m 10 10 h 20 v 10 h -20 z m 5 5 l 5 0 0 5")
    assert len(path) == 2
    assert [s.end for s in path[0].segments] == [(30.0, 10.0), (30.0, 20.0), (10.0, 20.0)]
    assert path[1].start == (15.0, 15.0)
    assert [s.end for s in path[1].segments] == [(20.0, 15.0), (20.0, 20.0)]
    assert not path[1].closed


def test_from_data_implicit_lineto():
    path = Path.from_data("M0,0 10,0 10,10")
    assert len(path) == 1
    assert [s.end for s in path[0].segments] == [(10.0, 0.0), (10.0, 10.0)]


def test_from_data_curves():
    path = Path.from_data("M 0 0 C 0 10 10 10 10 0 c 0 -5 5 -5 5 0")
    segments = path[0].segments
    assert segments[0].is_curve
    assert segments[0].control1 == (0.0, 10.0)
    assert segments[1].control1 == (10.0, -5.0)
    assert segments[1].end == (15.0, 0.0)
    x, y, width, height = path.bounds
    assert x == 0.0
    assert width == 15.0
    assert y == pytest.approx(-3.75)
    assert y + height == pytest.approx(7.5)


@pytest.mark.parametrize("data", ["10 10", "M 10", "M 0 0 C 1 2 3"])
def test_from_data_invalid(data):
    with pytest.raises(ValueError):
        Path.from_data(data)


def test_to_data_round_trip():
    data = "M 0 0 L 10 0 C 10 5 5 10 0 10 Z"
    assert Path.from_data(data).to_data() == data


def test_empty_path():
    path = Path()
    assert path.is_empty()
    assert path.bounds == (0.0, 0.0, 0.0, 0.0)
    assert Path.from_data("").is_empty()


def test_rectangle_and_ellipse():
    assert Path.rectangle(1, 2, 3, 4).bounds == (1.0, 2.0, 3.0, 4.0)
    x, y, width, height = Path.ellipse(10, 10, 5, 3).bounds
    assert (x, y) == pytest.approx((5, 7))
    assert (width, height) == pytest.approx((10, 6))


def test_signed_area():
    clockwise = Path.from_data("M 0 0 h 10 v 10 h -10 z")[0]
    counter = Path.from_data("M 0 0 v 10 h 10 v -10 z")[0]
    assert clockwise.signed_area() == pytest.approx(100)
    assert counter.signed_area() == pytest.approx(-100)


def test_transformed():
    path = Path.rectangle(1, 1, 2, 2).transformed(scale_matrix(2, 3))
    assert path.bounds == (2.0, 3.0, 4.0, 6.0)


def test_subpath_builder():
    subpath = Subpath((0, 0)).line_to(5, 0).curve_to(5, 5, 0, 5, 0, 0).close()
    assert len(subpath) == 3
    assert subpath.current_point == (0.0, 0.0)
    assert list(subpath.symbol()) == [
        "M", 0.0, 0.0, "L", 5.0, 0.0, "C", 5.0, 5.0, 0.0, 5.0, 0.0, 0.0, "Z",
    ]
    flat = subpath.flatten(samples=4)
    assert flat.shape == (6, 2)
    assert np.allclose(flat[-1], (0, 0))


def test_path_add():
    path = Path()
    path.add(Subpath((0, 0)).line_to(1, 1))
    path.extend(Path.rectangle(0, 0, 4, 4))
    assert len(path) == 2
    assert [len(s) for s in path] == [2, 4]
