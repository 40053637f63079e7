import logging

import pytest
from PIL import Image

from texfill.__main__ import main, parse_args
from texfill.api.items import TexturedShape
from texfill.render.surface import RasterSurface

logger = logging.getLogger(__name__)


@pytest.fixture
def texture_file(tmp_path):
    path = tmp_path / "texture.png"
    Image.new("RGB", (8, 4), (0, 255, 0)).save(path)
    return str(path)


@pytest.mark.parametrize("argv", [["-h"], ["--version"], ["path", "-h"], []])
def test_main_exits(argv):
    with pytest.raises(SystemExit):
        main(argv)


def test_parse_args():
    args = parse_args(
        [
            "-v",
            "path",
            "M 0 0 h 10 v 10 z",
            "texture.png",
            "out.png",
            "--settings",
            '{"syncRatio": true, "scaling": 2}',
            "--fill-rule",
            "evenodd",
        ]
    )
    assert args.verbose
    assert args.command == "path"
    assert args.settings == {"syncRatio": True, "scaling": 2}
    assert args.fill_rule == "evenodd"


@pytest.mark.parametrize("settings", ["{", "[1, 2]"])
def test_parse_args_invalid_settings(settings):
    with pytest.raises(SystemExit):
        parse_args(["path", "M 0 0", "t.png", "o.png", "--settings", settings])


def test_main_missing_texture(tmp_path):
    output = tmp_path / "output.png"
    argv = ["path", "M 0 0 h 10 v 10 h -10 z", str(tmp_path / "missing.png"), str(output)]
    assert main(argv) == 1
    assert not output.exists()


def test_main_attaches_render_surface(tmp_path, monkeypatch):
    views = []
    monkeypatch.setattr(TexturedShape, "attach", lambda self, view: views.append(view))
    argv = ["path", "M 0 0 h 10 v 10 h -10 z", str(tmp_path / "missing.png"), "out.png"]
    main(argv)
    assert len(views) == 1
    assert isinstance(views[0], RasterSurface)
    assert views[0].size == (10, 10)


@pytest.mark.composite
def test_main_path(tmp_path, texture_file):
    output = tmp_path / "output.png"
    argv = [
        "--verbose",
        "path",
        "M 0 0 h 40 v 20 h -40 z",
        texture_file,
        str(output),
        "--settings",
        '{"horizontalFlip": true}',
    ]
    assert main(argv) is None
    with Image.open(output) as image:
        assert image.size == (40, 20)
        assert image.getpixel((20, 10)) == (0, 255, 0, 255)


@pytest.mark.composite
def test_main_text(tmp_path, texture_file):
    output = tmp_path / "output.png"
    argv = [
        "text",
        "Hello\\nworld",
        texture_file,
        str(output),
        "--font-size",
        "24",
        "--justification",
        "center",
        "--background",
        "white",
    ]
    assert main(argv) is None
    with Image.open(output) as image:
        assert image.getpixel((0, 0)) == (255, 255, 255, 255)
        assert image.height >= 48
