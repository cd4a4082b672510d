"""
Helper utilities for the screenshot courier.

Common functions used across domains.
"""

import re
from pathlib import Path
from typing import Optional


TRANSIENT_NETWORK_PATTERN = re.compile(
    r"ETIMEDOUT|getaddrinfo|Something took too long to do|Name or service not known"
    r"|Temporary failure in name resolution|timed out"
)


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""
    try:
        return path.expanduser().resolve()
    except FileNotFoundError:
        return path.expanduser().absolute()


def default_screenshot_dir(username: str, home: Optional[Path] = None) -> Path:
    """
    Get the directory RuneLite writes screenshots to for a player.

    Args:
        username: RuneLite account display name
        home: Home directory override (defaults to the current user's)

    Returns:
        Screenshot directory path
    """
    base = home if home is not None else Path.home()
    return base / ".runelite" / "screenshots" / username


def matches_transient_network_failure(text: str) -> bool:
    """Check if an error message looks like a timeout or DNS failure."""
    return bool(TRANSIENT_NETWORK_PATTERN.search(text or ""))


def plural(count: int, word: str) -> str:
    """Format a count with a naively pluralised noun."""
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
