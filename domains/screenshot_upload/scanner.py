"""
Screenshot directory scanner.

Lists the watched directory on every batch (no change notifications) and
orders what it finds oldest-first so deliveries keep their capture order.
"""

import os
from pathlib import Path
from typing import Iterable, List

from loguru import logger

from app.utils.helpers import normalise_path
from domains.screenshot_upload.errors import DirectoryUnavailable
from domains.screenshot_upload.ledger import Ledger
from domains.screenshot_upload.models import ScreenshotFile


def creation_time(stats: os.stat_result) -> float:
    """
    Get a file's creation timestamp.

    Uses the birth time where the platform reports one and the
    modification time otherwise.
    """
    birthtime = getattr(stats, "st_birthtime", None)
    if birthtime:
        return birthtime
    return stats.st_mtime


def scan(directory: Path) -> List[ScreenshotFile]:
    """
    List screenshots directly inside ``directory``, oldest first.

    Args:
        directory: Directory RuneLite saves screenshots to

    Returns:
        Screenshots ordered by creation time, then by filename

    Raises:
        DirectoryUnavailable: If the directory cannot be listed
    """
    directory = normalise_path(Path(directory))
    screenshots = []

    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if not entry.is_file():
                        continue
                    stats = entry.stat()
                except FileNotFoundError:
                    # Removed between listing and stat
                    continue
                screenshots.append(
                    ScreenshotFile(path=Path(entry.path), created_at=creation_time(stats))
                )
    except OSError as e:
        raise DirectoryUnavailable(directory, e) from e

    screenshots.sort(key=lambda s: (s.created_at, s.name))
    logger.debug(f"Found {len(screenshots)} files in {directory}")
    return screenshots


def filter_new(screenshots: Iterable[ScreenshotFile], ledger: Ledger) -> List[ScreenshotFile]:
    """Drop screenshots the ledger already records, keeping order."""
    delivered = set(ledger.entries())
    return [s for s in screenshots if s.id not in delivered]
