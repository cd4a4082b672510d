"""
RuneLite Screenshot Courier - Main entry point

Posts new RuneLite screenshots to Discord:
- Level-ups, quests, Barrows chests, pet drops and everything else
  each go to their own channel
- Every screenshot is posted once, even across restarts
- Runs continuously or once (RUN_ONCE=true / --once)
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from app.utils.config import Settings, get_settings
from domains.screenshot_upload.destinations import DestinationResolver
from domains.screenshot_upload.dispatcher import BatchRunner, Dispatcher
from domains.screenshot_upload.errors import is_transient_network_error
from domains.screenshot_upload.ledger import JsonStateStore, Ledger
from domains.screenshot_upload.messenger import DiscordMessenger, Messenger
from domains.screenshot_upload.scheduler import Scheduler


# Exit status telling a supervisor the failure was a timeout or DNS problem
TRANSIENT_NETWORK_EXIT_CODE = 200


def configure_logging(level: str = "INFO") -> None:
    """Configure loguru output."""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level.upper()
    )


async def run(settings: Settings, messenger: Optional[Messenger] = None) -> int:
    """
    Start the courier.

    Initializes the ledger, makes sure every channel exists, then runs
    either a single batch or the periodic loop.

    Args:
        settings: Application settings
        messenger: Messaging client (Discord when omitted)

    Returns:
        Number of screenshots delivered in one-shot mode
    """
    screenshot_dir = settings.get_screenshot_dir()
    messenger = messenger or DiscordMessenger(settings=settings)

    try:
        ledger = Ledger(JsonStateStore(settings.state_file))
        ledger.initialize()

        resolver = DestinationResolver(messenger)
        await resolver.ensure_all()

        runner = BatchRunner(screenshot_dir, Dispatcher(ledger, resolver, messenger))
        scheduler = Scheduler(
            runner,
            interval=settings.scan_interval,
            grace_period=settings.shutdown_grace,
        )

        logger.success(settings.ready_text)
        logger.info(f"Watching screenshot directory: {screenshot_dir}")

        if settings.run_once:
            return await scheduler.run_once()

        await scheduler.run_forever()
        return 0
    finally:
        await messenger.close()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Post new RuneLite screenshots to Discord channels.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Upload pending screenshots once and exit (same as RUN_ONCE=true).",
    )
    parser.add_argument(
        "--screenshot-dir",
        type=Path,
        default=None,
        help="Directory to watch (default: ~/.runelite/screenshots/<username>).",
    )
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Where to keep the record of posted screenshots.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    overrides = {}
    if args.once:
        overrides["run_once"] = True
    if args.screenshot_dir is not None:
        overrides["screenshot_dir"] = args.screenshot_dir
    if args.state_file is not None:
        overrides["state_file"] = args.state_file
    settings = get_settings().model_copy(update=overrides)

    configure_logging(settings.log_level)

    try:
        settings.get_screenshot_dir()
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Screenshot courier stopped by user")
        return 0
    except Exception as e:
        if is_transient_network_error(e):
            logger.error(f"Network unavailable, exiting: {e}")
            return TRANSIENT_NETWORK_EXIT_CODE
        logger.exception("Unhandled failure")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
