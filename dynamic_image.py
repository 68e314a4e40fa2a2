"""
Command line entry point for Dynamic Image.

Renders a banner either from a JSON job file or from command line options
and writes the encoded image to a file or to standard output. Logs go to
standard error so the image stream stays clean.

Examples:
    python dynamic_image.py --job banners/status.json > status.png
    python dynamic_image.py --base bg.png --cache-dir /tmp/cache \\
        --overlay logo.png@10,10 --text "42 online" --font vera.ttf \\
        --color 255,255,255 --border-color 0,0,0 --x 20 --y 80 -o out.png
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from DI_Libs.BannerLib.banner_job import (
    BannerJob,
    LayerSpec,
    TextSpec,
    load_banner_job,
    parse_color,
    run_banner_job,
)
from DI_Libs.constants import DEFAULT_FONT_SIZE, DEFAULT_MERGE_STRATEGY, MERGE_STRATEGIES
from DI_Libs.exceptions import ConfigError, DynamicImageError

logger = logging.getLogger("dynamic_image")


def _parse_ints(value: str, count: Sequence[int], what: str) -> List[int]:
    try:
        numbers = [int(part) for part in value.split(",")]
    except ValueError as e:
        raise ConfigError(f"Invalid {what}: {value}") from e
    if len(numbers) not in count:
        raise ConfigError(f"Invalid {what}: {value}")
    return numbers


def _parse_size(value: str) -> Tuple[int, int]:
    parts = value.lower().split("x")
    if len(parts) != 2:
        raise ConfigError(f"Invalid canvas size: {value} (expected WIDTHxHEIGHT)")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ConfigError(f"Invalid canvas size: {value} (expected WIDTHxHEIGHT)") from e


def _parse_overlay(value: str, strategy: str, alpha: Optional[int]) -> LayerSpec:
    """Parse PATH or PATH@X,Y."""
    path, _, position = value.partition("@")
    x, y = _parse_ints(position, (2,), "overlay position") if position else (0, 0)
    return LayerSpec(image_path=path, x=x, y=y, strategy=strategy, alpha=alpha)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dynamic-image",
        description="Compose images and text overlays into a GIF, JPEG or PNG.",
    )
    parser.add_argument("--job", type=Path, help="JSON banner job file")

    base = parser.add_mutually_exclusive_group()
    base.add_argument("--base", help="Base image (GIF, JPEG or PNG)")
    base.add_argument("--blank", help="Blank base canvas size, e.g. 468x60")

    parser.add_argument("--cache-dir", help="Existing directory used to cache decoded sources")
    parser.add_argument(
        "--overlay",
        action="append",
        default=[],
        metavar="PATH[@X,Y]",
        help="Image merged onto the base (repeatable)",
    )
    parser.add_argument(
        "--strategy",
        choices=MERGE_STRATEGIES,
        default=DEFAULT_MERGE_STRATEGY,
        help="Merge strategy for overlays",
    )
    parser.add_argument("--overlay-alpha", type=int, help="Blend overlays at this alpha (0-127)")

    parser.add_argument("--text", help="Text to draw")
    parser.add_argument("--font", help="TrueType font file")
    parser.add_argument("--size", type=float, default=DEFAULT_FONT_SIZE, help="Font size in points")
    parser.add_argument("--color", default="255,255,255", help="Text color R,G,B[,A]")
    parser.add_argument("--border-color", help="Outline color R,G,B[,A]")
    parser.add_argument("--shadow-color", help="Drop shadow color R,G,B[,A]")
    parser.add_argument("--x", type=int, default=0, help="Text baseline x")
    parser.add_argument("--y", type=int, default=0, help="Text baseline y")

    parser.add_argument("-o", "--output", type=Path, help="Output file (default: standard output)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    return parser


def job_from_args(args: argparse.Namespace) -> BannerJob:
    """Build a BannerJob from parsed command line options."""
    if args.job is not None:
        job = load_banner_job(args.job)
    else:
        width = height = None
        if args.blank:
            width, height = _parse_size(args.blank)
        job = BannerJob(base_image=args.base, width=width, height=height)

    if args.cache_dir:
        job.cache_dir = args.cache_dir

    for overlay in args.overlay:
        job.layers.append(_parse_overlay(overlay, args.strategy, args.overlay_alpha))

    if args.text is not None:
        if not args.font:
            raise ConfigError("--text requires --font")

        def color(value: Optional[str]):
            if value is None:
                return None
            return parse_color(_parse_ints(value, (3, 4), "color"))

        job.texts.append(
            TextSpec(
                text=args.text,
                x=args.x,
                y=args.y,
                font=args.font,
                size=args.size,
                color=color(args.color),
                border_color=color(args.border_color),
                shadow_color=color(args.shadow_color),
            )
        )

    if args.output is not None:
        job.output = str(args.output)

    return job


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s [%(name)s] %(message)s", stream=sys.stderr)

    if args.job is None and args.base is None and args.blank is None:
        parser.error("one of --job, --base or --blank is required")

    try:
        job = job_from_args(args)
        with run_banner_job(job) as canvas:
            if job.output:
                path = canvas.save(job.output)
                logger.info(f"Wrote {path}")
            else:
                canvas.render()
    except DynamicImageError as e:
        print(f"dynamic-image: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
