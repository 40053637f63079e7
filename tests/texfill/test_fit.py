import numpy as np
import pytest

from texfill.errors import DegenerateGeometry
from texfill.fit import TransformOp, compute_fit
from texfill.settings import TextureSettings


def _ops(fit):
    return [(op.name, op.args) for op in fit.operations]


def test_width_fit_covers():
    fit = compute_fit(100, 50, 2.0)
    assert (fit.draw_width, fit.draw_height) == (100, 50)
    assert (fit.offset_x, fit.offset_y) == (0, 0)
    assert _ops(fit) == [("translate", (0.0, 0.0))]


def test_height_fit_covers():
    fit = compute_fit(100, 100, 2.0)
    assert fit.draw_height == 100
    assert fit.draw_width == 200


@pytest.mark.parametrize(
    "width, height, ratio",
    [
        (100, 50, 2.0),
        (100, 50, 0.5),
        (1, 1000, 3.7),
        (1000, 1, 0.01),
        (33.3, 77.7, 1.0),
        (0.5, 0.25, 123.0),
    ],
)
def test_cover_fills_box(width, height, ratio):
    fit = compute_fit(width, height, ratio, TextureSettings(scaling=1, sync_ratio=True))
    assert fit.draw_width >= width - 1e-9
    assert fit.draw_height >= height - 1e-9
    assert fit.draw_width / fit.draw_height == pytest.approx(ratio)


@pytest.mark.parametrize(
    "width, height, ratio",
    [(0, 10, 1.0), (10, 0, 1.0), (-5, 10, 1.0), (10, 10, 0.0)],
)
def test_degenerate(width, height, ratio):
    with pytest.raises(DegenerateGeometry):
        compute_fit(width, height, ratio)


def test_degenerate_scaling():
    with pytest.raises(DegenerateGeometry):
        compute_fit(100, 50, 2.0, TextureSettings(sync_ratio=True, scaling=0))
    with pytest.raises(DegenerateGeometry):
        compute_fit(100, 50, 2.0, TextureSettings(scaling_y=-1))


def test_degenerate_is_value_error():
    with pytest.raises(ValueError):
        compute_fit(0, 0, 1.0)


def test_explicit_extents():
    fit = compute_fit(10, 10, 2.0, TextureSettings(text_width=60))
    assert (fit.draw_width, fit.draw_height) == (60, 30)
    fit = compute_fit(10, 10, 2.0, TextureSettings(text_width=60, text_height=40))
    assert (fit.draw_width, fit.draw_height) == (80, 40)
    fit = compute_fit(10, 10, 2.0, TextureSettings(text_width=60, text_height=20))
    assert (fit.draw_width, fit.draw_height) == (60, 30)


def test_sync_ratio_scaling():
    settings = TextureSettings(sync_ratio=True, scaling=1.5, scaling_x=3, scaling_y=3)
    fit = compute_fit(100, 50, 2.0, settings)
    assert (fit.draw_width, fit.draw_height) == (150, 75)


def test_independent_scaling():
    settings = TextureSettings(scaling=4, scaling_x=2, scaling_y=0.5)
    fit = compute_fit(100, 50, 2.0, settings)
    assert (fit.draw_width, fit.draw_height) == (200, 25)


def test_offsets_and_positions():
    settings = TextureSettings(
        offset_left=10, offset_top=5, left_position=3, top_position=2
    )
    fit = compute_fit(100, 50, 2.0, settings)
    assert (fit.offset_x, fit.offset_y) == (-7, -7)
    assert _ops(fit)[0] == ("translate", (-7.0, -7.0))


def test_operation_order():
    settings = TextureSettings(horizontal_flip=True, vertical_flip=True, rotation=30)
    fit = compute_fit(100, 50, 2.0, settings)
    assert _ops(fit) == [
        ("translate", (0.0, 0.0)),
        ("translate", (100.0, 0.0)),
        ("scale", (-1.0, 1.0)),
        ("translate", (0.0, 50.0)),
        ("scale", (1.0, -1.0)),
        ("translate", (50.0, 25.0)),
        ("rotate", (30.0,)),
        ("translate", (-50.0, -25.0)),
    ]


def test_zero_rotation_still_emitted():
    fit = compute_fit(100, 50, 2.0, TextureSettings(rotation=0))
    assert [op.name for op in fit.operations] == [
        "translate",
        "translate",
        "rotate",
        "translate",
    ]


def test_horizontal_flip_matrix():
    fit = compute_fit(100, 50, 2.0, TextureSettings(horizontal_flip=True))
    matrix = fit.matrix()
    assert np.allclose(matrix @ [0, 0, 1], [100, 0, 1])
    assert np.allclose(matrix @ [100, 50, 1], [0, 50, 1])
    assert np.allclose(matrix @ [25, 10, 1], [75, 10, 1])


def test_rotation_about_center():
    fit = compute_fit(100, 50, 2.0, TextureSettings(rotation=180))
    matrix = fit.matrix()
    assert np.allclose(matrix @ [50, 25, 1], [50, 25, 1])
    assert np.allclose(matrix @ [0, 0, 1], [100, 50, 1])


def test_apply_replays_operations():
    class Recorder(object):
        def __init__(self):
            self.calls = []

        def translate(self, *args):
            self.calls.append(("translate", args))

        def scale(self, *args):
            self.calls.append(("scale", args))

        def rotate(self, *args):
            self.calls.append(("rotate", args))

    fit = compute_fit(100, 50, 2.0, TextureSettings(vertical_flip=True))
    recorder = Recorder()
    fit.apply(recorder)
    assert recorder.calls == _ops(fit)


def test_transform_op_validates_name():
    with pytest.raises(ValueError):
        TransformOp("skew", (1.0,))
