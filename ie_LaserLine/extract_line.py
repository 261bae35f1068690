"""Command line runner: extract the laser line of one image file."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser

import cv2

from ie_LaserLine.Algorithm.laser_line_algorithm import LaserColor, LaserLineContext
from ie_LaserLine.Algorithm.weighted_average import WeightedAverage
from ie_LaserLine.UI.line_overlay import draw_laser_line
from ie_LaserLine.Utility.configReader import configReader
from ie_LaserLine.Utility.ieErrors import ConfigException, LaserLineException

log = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="ie-laserline", description="Weighted average laser line extraction")
    parser.add_argument("image", type=str)
    parser.add_argument("-c", "--config", dest="config", default=None, type=str)
    parser.add_argument("-t", "--threshold", dest="threshold", default=None, type=int)
    parser.add_argument("--color", dest="color", default=None, choices=[c.name.lower() for c in LaserColor])
    parser.add_argument("-w", "--workers", dest="workers", default=None, type=int)
    parser.add_argument("--csv", dest="csv", default=None, type=str)
    parser.add_argument("--overlay", dest="overlay", default=None, type=str)
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true")
    return parser


def _color_from_config(reader: configReader | None) -> LaserColor:
    name = reader.getStr("laser_color", "red") if reader is not None else "red"
    try:
        return LaserColor.parse(name)
    except ValueError as e:
        raise ConfigException(str(e)) from e


def run(args) -> int:
    reader = configReader(args.config) if args.config else None
    algo = WeightedAverage.from_config(reader) if reader is not None else WeightedAverage()
    if args.threshold is not None:
        algo.intensity_threshold = args.threshold
    if args.workers is not None:
        algo.workers = max(1, args.workers)
    color = LaserColor.parse(args.color) if args.color else _color_from_config(reader)

    context = LaserLineContext.from_path(args.image, color)
    ok, line = algo.find_laser_line(context)
    log.info(
        "%s: %d of %d columns hold a laser point (threshold=%d, color=%s)",
        args.image, int(line.valid.sum()), line.width, algo.intensity_threshold, color.name.lower(),
    )

    if args.csv:
        line.to_frame().to_csv(args.csv, index=False)
        log.info("wrote %s", args.csv)
    if args.overlay:
        if not cv2.imwrite(args.overlay, draw_laser_line(context.image, line)):
            raise LaserLineException(f"overlay could not be written: {args.overlay}")
        log.info("wrote %s", args.overlay)
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except LaserLineException as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
