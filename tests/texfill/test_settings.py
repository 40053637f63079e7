import pytest

from texfill.settings import TextureSettings, coerce_settings


def test_defaults():
    settings = TextureSettings()
    assert settings.scaling is None
    assert settings.sync_ratio is False
    assert settings.horizontal_flip is False
    assert settings.to_dict() == {}


def test_from_dict_camel_case():
    settings = TextureSettings.from_dict(
        {
            "scaling": "1.5",
            "syncRatio": True,
            "offsetLeft": 10,
            "topPosition": 2,
            "horizontalFlip": 1,
            "rotation": 45,
            "textWidth": 200,
        }
    )
    assert settings.scaling == 1.5
    assert settings.sync_ratio is True
    assert settings.offset_left == 10.0
    assert settings.top_position == 2.0
    assert settings.horizontal_flip is True
    assert settings.rotation == 45.0
    assert settings.text_width == 200.0


def test_from_dict_snake_case():
    settings = TextureSettings.from_dict({"scaling_x": 2, "vertical_flip": True})
    assert settings.scaling_x == 2.0
    assert settings.vertical_flip is True


def test_from_dict_ignores_unknown_keys():
    settings = TextureSettings.from_dict({"scaling": 2, "opacity": 0.5, "foo": None})
    assert settings == TextureSettings(scaling=2)


def test_from_dict_none():
    assert TextureSettings.from_dict(None) == TextureSettings()


def test_from_dict_invalid_value():
    with pytest.raises(ValueError):
        TextureSettings.from_dict({"scaling": "large"})


@pytest.mark.parametrize(
    "value, expected",
    [("false", False), ("False", False), ("0", False), ("true", True), ("yes", True), (0, False)],
)
def test_from_dict_flag_strings(value, expected):
    settings = TextureSettings.from_dict({"syncRatio": value, "horizontalFlip": value})
    assert settings.sync_ratio is expected
    assert settings.horizontal_flip is expected


def test_from_dict_invalid_flag():
    with pytest.raises(ValueError):
        TextureSettings.from_dict({"verticalFlip": "sometimes"})


def test_to_dict():
    data = {"scalingX": 2.0, "syncRatio": True, "verticalFlip": True, "rotation": 0.0}
    settings = TextureSettings.from_dict(data)
    assert settings.to_dict() == data


def test_frozen():
    settings = TextureSettings()
    with pytest.raises(AttributeError):
        settings.scaling = 2.0  # type: ignore[misc]


def test_coerce_settings():
    settings = TextureSettings(scaling=2)
    assert coerce_settings(settings) is settings
    assert coerce_settings(None) is None
    assert coerce_settings({"scaling": 2}) == settings
    with pytest.raises(TypeError):
        coerce_settings(42)  # type: ignore[arg-type]
