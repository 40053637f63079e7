import argparse
import json
import logging
from typing import Any, Optional

from texfill.api.items import CompoundPath, PointText, TexturedShape
from texfill.api.path import Path
from texfill.api.style import Style
from texfill.cache import BitmapCache
from texfill.errors import TextureError
from texfill.loader import TextureLoader
from texfill.render.surface import RasterSurface
from texfill.version import __version__

logger = logging.getLogger(__name__)


def _settings(value: str) -> dict[str, Any]:
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError("invalid settings JSON: %s" % e)
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError("settings must be a JSON object")
    return data


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("texture", help="Texture file, data: URI or http(s) URL")
    parser.add_argument("output_file", help="Output image file")
    parser.add_argument("--width", type=int, default=None, help="Output width")
    parser.add_argument("--height", type=int, default=None, help="Output height")
    parser.add_argument(
        "--settings",
        type=_settings,
        default=None,
        help='Texture settings as JSON, e.g. \'{"syncRatio": true}\'',
    )
    parser.add_argument("--fill", default="black", help="Fill color")
    parser.add_argument("--stroke", default=None, help="Stroke color")
    parser.add_argument("--stroke-width", type=float, default=1.0, help="Stroke width")
    parser.add_argument("--background", default=None, help="Background color")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Texture load timeout in seconds"
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="texfill command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    path_parser = subparsers.add_parser("path", help="Fill SVG path data with a texture")
    path_parser.add_argument("path_data", help="SVG path data, e.g. 'M 0 0 h 100 v 50 h -100 z'")
    _add_common_arguments(path_parser)
    path_parser.add_argument(
        "--fill-rule", choices=("nonzero", "evenodd"), default="nonzero", help="Fill rule"
    )

    text_parser = subparsers.add_parser("text", help="Fill a text block with a texture")
    text_parser.add_argument("content", help="Text content, lines separated by \\n")
    _add_common_arguments(text_parser)
    text_parser.add_argument("--font", default=None, help="Font file or name")
    text_parser.add_argument("--font-size", type=float, default=48.0, help="Font size")
    text_parser.add_argument("--leading", type=float, default=None, help="Line spacing")
    text_parser.add_argument(
        "--justification",
        choices=("left", "center", "right"),
        default="left",
        help="Line justification",
    )

    return parser.parse_args(argv)


def _build_item(args: argparse.Namespace, loader: TextureLoader) -> TexturedShape:
    style_args: dict[str, Any] = dict(
        fill_color=args.fill,
        stroke_color=args.stroke,
        stroke_width=args.stroke_width,
    )
    if args.command == "path":
        style = Style(fill_rule=args.fill_rule, **style_args)
        return CompoundPath(
            args.path_data.replace("\\n", "\n"),
            style=style,
            loader=loader,
            texture_settings=args.settings,
        )
    style = Style(
        font_family=args.font,
        font_size=args.font_size,
        leading=args.leading,
        justification=args.justification,
        **style_args,
    )
    return PointText(
        content=args.content.replace("\\n", "\n"),
        style=style,
        loader=loader,
        texture_settings=args.settings,
    )


def _canvas_size(args: argparse.Namespace, item: TexturedShape) -> tuple[int, int]:
    x, y, width, height = item.bounds
    padding = args.stroke_width if args.stroke else 0.0
    right = max(x + width + padding, 1.0)
    bottom = max(y + height + padding, 1.0)
    return (
        args.width or int(round(right)),
        args.height or int(round(bottom)),
    )


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("texfill").setLevel(logging.DEBUG)
    else:
        logging.getLogger("texfill").setLevel(logging.INFO)

    errors: list[TextureError] = []
    with TextureLoader(BitmapCache()) as loader:
        try:
            item = _build_item(args, loader)
        except ValueError as e:
            logger.error(str(e))
            return 1
        if args.command == "text":
            item.point = (-item.bounds[0], -item.bounds[1])
        width, height = _canvas_size(args, item)
        surface = RasterSurface(width, height)
        item.attach(surface)
        item.on("error", lambda event: errors.append(event.error))
        item.texture_url = args.texture
        if not loader.wait(args.timeout):
            logger.error("Timed out loading texture: %s" % args.texture)
            return 1
    if errors:
        return 1

    try:
        if args.background:
            surface.fill_path(
                Path.rectangle(0, 0, width, height),
                Style(fill_color=args.background),
            )
        item.draw(surface)
    except ImportError as e:
        logger.error(str(e))
        return 1
    surface.to_pil().save(args.output_file)
    logger.info("Saved %dx%d image to %s" % (width, height, args.output_file))
    return None


if __name__ == "__main__":
    main()
