import attrs
import pytest

from texfill.api.style import Shadow, Style, to_color
from texfill.constants import FillRule, Justification


@pytest.mark.parametrize(
    "value, expected",
    [
        ("red", (1.0, 0.0, 0.0, 1.0)),
        ("#00ff0080", (0.0, 1.0, 0.0, 128 / 255)),
        ((0.5, 0.5, 0.5), (0.5, 0.5, 0.5, 1.0)),
        ([0, 0, 1, 0.25], (0.0, 0.0, 1.0, 0.25)),
        (None, None),
    ],
)
def test_to_color(value, expected):
    color = to_color(value)
    if expected is None:
        assert color is None
    else:
        assert color == pytest.approx(expected)


@pytest.mark.parametrize("value", ["not-a-color", (1, 2)])
def test_to_color_invalid(value):
    with pytest.raises(ValueError):
        to_color(value)


def test_style_defaults():
    style = Style()
    assert style.fill_color == (0.0, 0.0, 0.0, 1.0)
    assert style.has_fill()
    assert not style.has_stroke()
    assert style.fill_rule == FillRule.NONZERO
    assert style.justification == Justification.LEFT
    assert style.get_leading() == pytest.approx(12.0)


def test_style_conversion():
    style = Style(
        fill_color="blue",
        stroke_color="white",
        stroke_width="3",
        fill_rule="evenodd",
        justification="center",
        shadow={"color": "black", "blur": 4},
        font_size=20,
        leading=30,
    )
    assert style.stroke_width == 3.0
    assert style.has_stroke()
    assert style.fill_rule == FillRule.EVENODD
    assert style.justification.factor == 0.5
    assert style.shadow == Shadow((0, 0, 0, 1), blur=4)
    assert style.get_leading() == 30.0


def test_style_no_fill():
    assert not Style(fill_color=None).has_fill()
    assert not Style(fill_color=(0, 0, 0, 0)).has_fill()
    assert not Style(stroke_color="red", stroke_width=0).has_stroke()


def test_style_evolve():
    style = Style(shadow=Shadow("black"))
    assert attrs.evolve(style, shadow=None).shadow is None
    assert style.shadow is not None


def test_style_invalid_enum():
    with pytest.raises(ValueError):
        Style(fill_rule="winding")
