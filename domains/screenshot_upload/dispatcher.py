"""
Screenshot delivery.

``Dispatcher`` posts a single screenshot and records it in the ledger;
``BatchRunner`` walks one scan's worth of screenshots oldest-first and
stops at the first failed upload so later screenshots are never posted
ahead of an earlier one.
"""

from pathlib import Path
from typing import Callable, List

import httpx
from loguru import logger

from app.utils.helpers import plural
from domains.screenshot_upload.classifier import build_caption, classify
from domains.screenshot_upload.destinations import DestinationResolver
from domains.screenshot_upload.errors import SendFailure
from domains.screenshot_upload.ledger import Ledger
from domains.screenshot_upload.messenger import Messenger
from domains.screenshot_upload.models import Category, DispatchResult, ScreenshotFile
from domains.screenshot_upload.scanner import filter_new, scan


class Dispatcher:
    """Delivers one screenshot at a time."""

    def __init__(self, ledger: Ledger, resolver: DestinationResolver, messenger: Messenger):
        self.ledger = ledger
        self.resolver = resolver
        self.messenger = messenger

    async def dispatch_one(self, screenshot: ScreenshotFile) -> DispatchResult:
        """
        Post a screenshot to its channel unless it was posted before.

        Args:
            screenshot: Screenshot to deliver

        Returns:
            DELIVERED once posted and recorded, SKIPPED if already recorded,
            FAILED if the upload did not go through
        """
        if self.ledger.contains(screenshot.id):
            return DispatchResult.SKIPPED

        label = classify(screenshot.name)
        destination = await self.resolver.resolve(label.category)
        caption = build_caption(label)

        if caption:
            logger.info(f"Uploading `{caption}` screenshot...")
        elif label.category is Category.PET:
            logger.info("Uploading Pet drop screenshot...")
        else:
            logger.info("Uploading misc screenshot...")

        try:
            await self.messenger.send(destination, screenshot.path, caption)
        except (SendFailure, httpx.HTTPError) as e:
            logger.error(f"Failed to upload screenshot {screenshot.name}: {e}")
            return DispatchResult.FAILED

        self.ledger.record(screenshot.id)
        logger.success(f"Successfully uploaded screenshot to #{destination.name}")
        return DispatchResult.DELIVERED


class BatchRunner:
    """Runs one scan-then-deliver pass over the screenshot directory."""

    def __init__(
        self,
        directory: Path,
        dispatcher: Dispatcher,
        scanner: Callable[[Path], List[ScreenshotFile]] = scan,
    ):
        self.directory = Path(directory)
        self.dispatcher = dispatcher
        self.scanner = scanner

    async def run_batch(self) -> int:
        """
        Deliver new screenshots in creation order.

        Stops at the first failed upload; the failed screenshot and any
        after it are retried on the next batch.

        Returns:
            Number of screenshots delivered

        Raises:
            DirectoryUnavailable: If the directory cannot be listed
        """
        logger.info("Checking for new screenshots...")
        screenshots = self.scanner(self.directory)
        pending = filter_new(screenshots, self.dispatcher.ledger)
        if pending:
            logger.info(f"Found {plural(len(pending), 'new screenshot')}")

        delivered = 0
        skipped = len(screenshots) - len(pending)
        for screenshot in pending:
            result = await self.dispatcher.dispatch_one(screenshot)
            if result is DispatchResult.DELIVERED:
                delivered += 1
            elif result is DispatchResult.SKIPPED:
                skipped += 1
            else:
                remaining = len(screenshots) - delivered - skipped - 1
                if remaining:
                    logger.warning(f"Stopping batch; {plural(remaining, 'screenshot')} left for the next run")
                break

        logger.info(f"Batch finished: {delivered} delivered, {skipped} skipped")
        return delivered
