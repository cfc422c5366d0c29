"""Command-line entry point.

Usage::

    python -m loft3d character.json                 # writes the configured output
    python -m loft3d character.json -o out/char.npz --workers 4
    python -m loft3d --demo -o pin.npz              # built-in bowling pin
"""
from __future__ import annotations

import argparse
import logging
import sys
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .logging_config import setup_logging
from .pipeline import PipelineError, run_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="loft3d",
        description="Loft a 3D mesh asset from front/side/top SVG silhouettes.",
    )
    parser.add_argument("config", nargs="?", help="Pipeline config JSON")
    parser.add_argument("-o", "--output", help="Output path (overrides the config)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Thread pool size for per-component lofting")
    parser.add_argument("--demo", action="store_true",
                        help="Build the bowling pin demo instead of a config")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    args = parser.parse_args(argv)
    if not args.demo and not args.config:
        parser.error("a config file is required unless --demo is given")
    return args


def _run_demo(output: Optional[str], workers: Optional[int]) -> Path:
    from .examples import BowlingPin

    with tempfile.TemporaryDirectory() as tmp:
        config = BowlingPin(tmp)
        target = Path(output) if output else Path("bowling_pin.npz")
        return run_pipeline(config, output=target, workers=workers)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)

    try:
        if args.demo:
            _run_demo(args.output, args.workers)
        else:
            config = load_config(args.config)
            run_pipeline(config, output=args.output, workers=args.workers)
    except PipelineError as exc:
        logger.error("ERROR: %s", exc)
        return 1
    except (OSError, ValueError, ET.ParseError) as exc:
        logger.error("Error: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
