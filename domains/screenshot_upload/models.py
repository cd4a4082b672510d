"""Value types shared by the screenshot upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Category(str, Enum):
    """Kind of screenshot, derived from its filename."""

    LEVEL_UP = "LevelUp"
    QUEST = "Quest"
    BARROWS = "Barrows"
    PET = "Pet"
    MISC = "Misc"


# One channel per category, created on startup if missing
DESTINATION_NAMES: dict[Category, str] = {
    Category.LEVEL_UP: "level-ups",
    Category.QUEST: "quests",
    Category.BARROWS: "barrows",
    Category.PET: "pets",
    Category.MISC: "misc",
}


@dataclass(frozen=True, slots=True)
class Label:
    """Classification of a screenshot filename."""

    category: Category
    detail: Optional[str] = None
    subject: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScreenshotFile:
    """A screenshot found on disk during a scan."""

    path: Path
    created_at: float

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def id(self) -> str:
        """Ledger identifier: the full path."""
        return str(self.path)


@dataclass(frozen=True, slots=True)
class Destination:
    """A chat channel screenshots are delivered to."""

    name: str
    channel_id: str


class DispatchResult(str, Enum):
    """Outcome of delivering a single screenshot."""

    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"
