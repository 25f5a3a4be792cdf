"""Command-line interface for framecolor.

Provides the main entry point for running the frame server, listing
the configured palette, and rendering a snapshot image to disk.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="framecolor",
        description="Interactive frame server with a button-selected background color",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/framecolor.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the frame HTTP server")
    serve_parser.add_argument("--host", type=str, default=None, help="Override listen host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override listen port")
    serve_parser.add_argument(
        "--strategy", choices=["shared", "per_cast"], default=None,
        help="Color store strategy",
    )

    subparsers.add_parser("palette", help="Print the configured palette")

    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Render the image for a selector and save it",
    )
    snapshot_parser.add_argument(
        "--selector", type=int, default=0,
        help="1-based palette selector (out of range renders the default color)",
    )
    snapshot_parser.add_argument(
        "-o", "--output", type=Path, default=Path("snapshot.jpg"),
        help="Output JPEG path",
    )

    return parser.parse_args(argv)


def _print_palette(settings) -> None:
    palette = settings.palette.build_palette()
    default = settings.palette.build_default_color()
    print(f"Default: {default.hex}  rgba={default.as_rgba()}")
    for index, color in enumerate(palette, start=1):
        print(f"  [{index}] {color.hex}  rgba={color.as_rgba()}")


def _snapshot(settings, selector: int, output: Path) -> None:
    """Render the image a client would see after pressing ``selector``."""
    from framecolor.utils.imaging import render_color_jpeg

    palette = settings.palette.build_palette()
    color = palette.lookup(selector) or settings.palette.build_default_color()
    data = render_color_jpeg(
        color,
        width=settings.image.width,
        height=settings.image.height,
        quality=settings.image.quality,
    )
    output.write_bytes(data)
    print(f"Saved {color.hex} image to {output} ({settings.image.width}x{settings.image.height})")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the framecolor CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from framecolor.config.settings import load_settings
    from framecolor.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        if args.host:
            settings.server.host = args.host
        if args.port:
            settings.server.port = args.port
        if args.strategy:
            settings.state.strategy = args.strategy
        logger.info("Starting frame server on %s:%d", settings.server.host, settings.server.port)
        from framecolor.server.app import create_app
        import uvicorn
        app = create_app(settings)
        uvicorn.run(app, host=settings.server.host, port=settings.server.port)

    elif args.command == "palette":
        _print_palette(settings)

    elif args.command == "snapshot":
        logger.info("Rendering snapshot for selector %d", args.selector)
        _snapshot(settings, args.selector, args.output)


if __name__ == "__main__":
    main()
