"""
Command-line interface for bezierspline.

Usage:
    bezierspline info curve.yml
    bezierspline sample curve.yml -n 50 --output samples.json
    bezierspline nearest curve.yml 1.0 2.0 0.0
    bezierspline validate-config config.yml

Curve files are YAML documents with the plain-data fields of a spline
(points, modes, loop) and an optional transform block:

    points: [[0, 0, 0], [1, 1, 0], [2, 1, 0], [3, 0, 0]]
    modes: [free, free]
    loop: false
    transform:
      translation: [0, 0, 0]
      rotation: [0, 0, 0, 1]   # quaternion x, y, z, w
      scale: [1, 1, 1]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from bezierspline import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="bezierspline",
        description="Inspect and query composite cubic Bezier splines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bezierspline info path.yml              Print structure and bounds
  bezierspline sample path.yml -n 100     Print 100 evenly spaced points
  bezierspline nearest path.yml 1 2 0     Nearest curve point to (1, 2, 0)
  bezierspline validate-config cfg.yml    Validate a configuration file
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )
    parser.add_argument(
        "--config", "-f",
        type=Path,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    info_parser = subparsers.add_parser("info", help="Show spline structure and bounds")
    info_parser.add_argument("curve_file", type=Path, help="Path to curve YAML file")

    sample_parser = subparsers.add_parser("sample", help="Sample points along the spline")
    sample_parser.add_argument("curve_file", type=Path, help="Path to curve YAML file")
    sample_parser.add_argument(
        "--count", "-n",
        type=int,
        default=20,
        help="Number of samples, including both ends (default: 20)",
    )
    sample_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write samples to this file (JSON format)",
    )

    nearest_parser = subparsers.add_parser("nearest", help="Find the nearest point on the spline")
    nearest_parser.add_argument("curve_file", type=Path, help="Path to curve YAML file")
    nearest_parser.add_argument("point", type=float, nargs=3, metavar=("X", "Y", "Z"))

    validate_parser = subparsers.add_parser("validate-config", help="Validate a configuration file")
    validate_parser.add_argument("config_file", type=Path, help="Path to configuration file")

    return parser


def setup_logging(verbose: int, quiet: bool) -> None:
    """Setup logging based on verbosity level."""
    import logging
    from bezierspline.logging import setup_logging as _setup_logging

    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    _setup_logging(level=level, force=True)


def load_spline(curve_file: Path, config=None):
    """Build a BezierSpline from a curve YAML file.

    Uses the global configuration unless ``config`` is given.
    """
    from bezierspline.config import get_config
    from bezierspline.exceptions import InvalidStructureError
    from bezierspline.spline import BezierSpline
    from bezierspline.transforms import AffineTransform

    with open(curve_file, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise InvalidStructureError(f"{curve_file} does not hold a mapping")

    transform = None
    transform_data = data.get("transform")
    if transform_data is not None and not isinstance(transform_data, dict):
        raise InvalidStructureError(f"{curve_file}: 'transform' must be a mapping")
    if transform_data:
        transform = AffineTransform.from_trs(
            translation=transform_data.get("translation", (0.0, 0.0, 0.0)),
            rotation=transform_data.get("rotation"),
            scale=transform_data.get("scale", (1.0, 1.0, 1.0)),
        )

    if config is None:
        config = get_config().config
    return BezierSpline.from_dict(data, transform=transform, config=config)


def _fmt(vector) -> str:
    return "(" + ", ".join(f"{c:.6g}" for c in vector) + ")"


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command."""
    from bezierspline.exceptions import BezierSplineError

    try:
        spline = load_spline(args.curve_file)
        box = spline.get_bounding_box()
    except (BezierSplineError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Spline: {args.curve_file}")
    print(f"  Curves: {spline.curve_count}")
    print(f"  Control points: {spline.control_point_count}")
    print(f"  Loop: {spline.loop}")
    print(f"  Modes: {', '.join(m.value for m in spline.store.modes)}")
    print(f"  Start: {_fmt(spline.get_point(0.0))}")
    print(f"  End: {_fmt(spline.get_point(1.0))}")
    print(f"  Bounds min: {_fmt(box.min)}")
    print(f"  Bounds max: {_fmt(box.max)}")
    return 0


def cmd_sample(args: argparse.Namespace) -> int:
    """Execute the sample command."""
    from bezierspline.exceptions import BezierSplineError
    from bezierspline.logging import LOG_ERROR, LOG_INFO

    try:
        spline = load_spline(args.curve_file)
        samples = spline.sample(args.count)
    except (BezierSplineError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        try:
            with open(args.output, "w") as f:
                json.dump({"samples": samples.tolist()}, f, indent=2)
            LOG_INFO(f"Samples saved to {args.output}")
        except OSError as e:
            LOG_ERROR(f"Error saving samples: {e}")
            return 1
    else:
        for i, p in enumerate(samples):
            print(f"{i / (args.count - 1):.6f} {p[0]:.6f} {p[1]:.6f} {p[2]:.6f}")
    return 0


def cmd_nearest(args: argparse.Namespace) -> int:
    """Execute the nearest command."""
    from bezierspline.exceptions import BezierSplineError

    try:
        spline = load_spline(args.curve_file)
        t = spline.get_nearest_parameter(args.point)
    except (BezierSplineError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Nearest t: {t:.6f}")
    print(f"Nearest point: {_fmt(spline.get_point(t))}")
    if spline.loop:
        print(f"Inside (convex test): {spline.is_point_inside(args.point)}")
    return 0


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Execute the validate-config command."""
    from bezierspline.config import ConfigManager
    from bezierspline.exceptions import ConfigurationError

    try:
        manager = ConfigManager(args.config_file)
        config = manager.load(validate=True)
        print(f"Configuration file '{args.config_file}' is valid.")
        print(f"  Bounds steps per curve: {config.bounds.steps_per_curve}")
        print(f"  Search step: {config.search.initial_step} -> {config.search.min_step}")
        print(f"  Velocity mode: {config.evaluation.velocity_mode}")
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error reading configuration: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from bezierspline.config import init_config
    from bezierspline.exceptions import ConfigurationError

    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose, args.quiet)

    # Global configuration, from --config when given
    try:
        init_config(args.config)
    except (ConfigurationError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Execute command
    if args.command == "info":
        return cmd_info(args)
    elif args.command == "sample":
        return cmd_sample(args)
    elif args.command == "nearest":
        return cmd_nearest(args)
    elif args.command == "validate-config":
        return cmd_validate_config(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
