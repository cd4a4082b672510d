"""Exceptions raised by the screenshot upload pipeline."""

from typing import Optional

import httpx

from app.utils.helpers import matches_transient_network_failure


class ScreenshotCourierError(Exception):
    """Base class for pipeline errors."""


class DirectoryUnavailable(ScreenshotCourierError):
    """The watched screenshot directory cannot be listed."""

    def __init__(self, directory, reason: Optional[BaseException] = None):
        self.directory = directory
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Screenshot directory unavailable: {directory}{detail}")


class SendFailure(ScreenshotCourierError):
    """A screenshot could not be delivered to its channel."""


class StateStoreError(ScreenshotCourierError):
    """The persisted state document is unreadable or malformed."""


def is_transient_network_error(exc: BaseException) -> bool:
    """
    Check if an exception is a timeout or name-resolution failure.

    Walks the ``__cause__``/``__context__`` chain so wrapped transport
    errors are recognised too.
    """
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (httpx.TimeoutException, TimeoutError)):
            return True
        if matches_transient_network_failure(str(current)):
            return True
        current = current.__cause__ or current.__context__
    return False
