import os
from pathlib import Path
from typing import Optional

import pytest

from domains.screenshot_upload.errors import SendFailure
from domains.screenshot_upload.ledger import JsonStateStore, Ledger
from domains.screenshot_upload.messenger import Messenger
from domains.screenshot_upload.models import Destination


class FakeMessenger(Messenger):
    """In-memory chat workspace."""

    def __init__(self, channels=()):
        self.channels = {name: Destination(name, f"id-{name}") for name in channels}
        self.created: list[str] = []
        self.sent: list[tuple[str, str, Optional[str]]] = []
        self.failing: set[str] = set()
        self.closed = False

    async def list_destinations(self):
        return list(self.channels.values())

    async def create_destination(self, name):
        destination = Destination(name, f"id-{name}")
        self.channels[name] = destination
        self.created.append(name)
        return destination

    async def send(self, destination, attachment, caption=None):
        if Path(attachment).name in self.failing:
            raise SendFailure(f"upload of {Path(attachment).name} rejected")
        self.sent.append((destination.name, Path(attachment).name, caption))

    async def close(self):
        self.closed = True


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "state.json"


@pytest.fixture
def ledger(state_file):
    ledger = Ledger(JsonStateStore(state_file))
    ledger.initialize()
    return ledger


@pytest.fixture
def screenshot_dir(tmp_path):
    directory = tmp_path / "screenshots"
    directory.mkdir()
    return directory


@pytest.fixture
def make_screenshot(screenshot_dir):
    """Create a screenshot file with a given creation (modification) time."""

    def _make(name: str, created_at: float) -> Path:
        path = screenshot_dir / name
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        os.utime(path, (created_at, created_at))
        return path

    return _make


@pytest.fixture(autouse=True)
def mtime_ordering(monkeypatch):
    """Order scans by modification time; birth time cannot be set from tests."""
    monkeypatch.setattr(
        "domains.screenshot_upload.scanner.creation_time",
        lambda stats: stats.st_mtime,
    )


@pytest.fixture
def make_messenger():
    """Build a fake workspace that already has the given channels."""
    return FakeMessenger
