"""
Festive Frames Entry Point
==========================

Command-line runner: loads settings, starts the supply pipeline and
drives a display sink until interrupted.

Usage:
    festive-frames --bootstrap-imgs-path ./bootstrap_imgs
    festive-frames --display log --cycles 5 --interval 1
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from festive_frames.config import load_config, setup_logging
from festive_frames.display import create_display, run_display_loop
from festive_frames.pipeline import SupplyPipeline


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="festive-frames",
        description="Display generated images on a small RGB pixel display",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--bootstrap-imgs-path",
        type=str,
        default=None,
        help="Directory of filler images (default from config: bootstrap_imgs)",
    )
    parser.add_argument(
        "--display",
        choices=["window", "log"],
        default=None,
        help="Display sink to use",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=0,
        help="Stop after this many display cycles (default: 0 = run until interrupted)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds each frame stays on screen",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.bootstrap_imgs_path is not None:
        path = Path(args.bootstrap_imgs_path)
        if not path.exists():
            print(f"'{path}' does not exist", file=sys.stderr)
            return 1
        if not path.is_dir():
            print(f"'{path}' is not a directory", file=sys.stderr)
            return 1

    settings = load_config(args.config)
    if args.bootstrap_imgs_path is not None:
        settings.bootstrap.path = args.bootstrap_imgs_path
    if args.display is not None:
        settings.display.backend = args.display
    if args.interval is not None:
        settings.display.frame_interval_seconds = args.interval

    setup_logging(settings)

    shutdown = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        shutdown.set()

    previous_handlers = {
        signum: signal.signal(signum, _handle_signal)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }

    display = create_display(settings.display.backend, settings.display.window_scale)
    pipeline = SupplyPipeline.from_settings(settings, shutdown)

    try:
        with pipeline:
            presented = run_display_loop(
                pipeline,
                display,
                shutdown,
                interval=settings.display.frame_interval_seconds,
                max_cycles=args.cycles,
            )
        logger.info(f"Presented {presented} frames")
    finally:
        display.close()
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    return 0


if __name__ == "__main__":
    sys.exit(main())
