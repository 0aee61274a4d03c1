"""Lifetrack entry point.

Usage:
    python -m lifetrack [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --once           Refresh once, print a JSON summary, and exit
    --dry-run        Load config and exit
    --help           Show this help message
    --version        Show version
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import LifetrackConfig
from .config.loader import load_config
from .config.profiles import detect_profile
from .dashboard import Dashboard


def _load_env() -> None:
    """Load .env from the project root, falling back to the working directory."""
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="lifetrack",
        description="Lifetrack - personal activity tracking dashboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m lifetrack                     # Run with auto-detected profile
  python -m lifetrack --profile prod      # Run with production profile
  python -m lifetrack --config my.yaml    # Run with custom config file
  python -m lifetrack --once              # Print one JSON summary and exit

Environment:
  LIFETRACK_PROFILE    Set profile (dev, prod, test)
  LIFETRACK_API_URL    Override the monitoring service URL
""",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config file",
        metavar="PATH",
    )

    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Lifetrack v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh once, print a JSON summary, and exit",
    )

    return parser.parse_args(argv)


async def run_once(config: LifetrackConfig) -> dict:
    """Open a dashboard, refresh once, and return its summary."""
    config.scheduler.auto_refresh = False
    async with Dashboard(config) as dashboard:
        return dashboard.summary()


async def run_forever(config: LifetrackConfig, logger: logging.Logger) -> None:
    """Run the dashboard until SIGINT or SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def request_shutdown() -> None:
        if stop.is_set():
            logger.warning("Force quit requested")
            sys.exit(1)
        logger.info("Shutdown requested, cleaning up...")
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, request_shutdown)

    async with Dashboard(config):
        logger.info(
            f"Dashboard running, refreshing every "
            f"{config.scheduler.refresh_interval_seconds}s"
        )
        await stop.wait()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Lifetrack.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    _load_env()
    args = parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        elif args.profile:
            config = load_config(profile=args.profile)
        else:
            config = load_config(profile=detect_profile())
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("lifetrack")

    logger.info(f"Lifetrack v{__version__}")
    logger.info(f"Profile: {args.profile or detect_profile().value}")
    logger.info(f"Log level: {config.logging.level}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"API: {config.api.base_url}")
        goals = ", ".join(f"{c.value}={m}" for c, m in config.goals.targets.items())
        logger.info(f"Goals: {goals}")
        return 0

    if args.once:
        summary = asyncio.run(run_once(config))
        print(json.dumps(summary, indent=2, default=str))
        return 0

    try:
        asyncio.run(run_forever(config, logger))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    logger.info("Lifetrack shut down gracefully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
