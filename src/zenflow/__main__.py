"""ZenFlow entry point.

Usage:
    python -m zenflow [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --mock-audio     Use mock audio and notifications
    --dry-run        Load config and exit
    --help           Show this help message
    --version        Show version
"""

import argparse
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config.loader import load_config
from .config.profiles import detect_profile


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
        prog="zenflow",
        description="ZenFlow - Task manager with reminders and ringing alarms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m zenflow                     # Run with auto-detected profile
  python -m zenflow --profile prod      # Run with production profile
  python -m zenflow --config my.yaml    # Run with custom config file

Environment:
  ZENFLOW_PROFILE     Set profile (dev, prod, test)
  ANTHROPIC_API_KEY   Enables productivity insights
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
        version=f"ZenFlow v{__version__}",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )

    parser.add_argument(
        "--mock-audio",
        action="store_true",
        help="Use mock audio and notifications (no sound card or desktop needed)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for ZenFlow.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    load_dotenv()
    args = parse_args(argv)
    profile = args.profile or detect_profile().value

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("zenflow")

    logger.info(f"ZenFlow v{__version__}")
    logger.info(f"Profile: {profile}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"Poll interval: {config.reminders.poll_interval_ms}ms")
        logger.info(f"Snooze: {config.reminders.snooze_minutes} minutes")
        logger.info(f"Storage: {config.storage.backend}")
        return 0

    from .app import ZenFlowApp
    from .console import Console

    try:
        app = ZenFlowApp.from_config(config, use_mocks=args.mock_audio)
    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        return 1

    insights = None
    if config.insights.enabled:
        from .insights.client import ClaudeInsightsConfig, ClaudeInsightsService

        try:
            insights = ClaudeInsightsService(ClaudeInsightsConfig.from_env(config.insights))
        except ValueError as e:
            logger.info(f"Insights disabled: {e}")

    def signal_handler(_signum: int, _frame: object) -> None:
        logger.info("Shutdown requested, cleaning up...")
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app.start()
    try:
        Console(app, insights=insights).run()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        app.stop()
        logger.info("ZenFlow shut down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
