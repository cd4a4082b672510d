"""
Delivery ledger.

Keeps the list of screenshots that were successfully posted so restarts
never post the same file twice. The list lives under the
``postedScreenshots`` key of a small JSON state document.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from loguru import logger

from domains.screenshot_upload.errors import StateStoreError


LEDGER_KEY = "postedScreenshots"


class JsonStateStore:
    """Keyed JSON document persisted to a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self, key: str) -> bool:
        return key in self._read()

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        document = self._read()
        document[key] = value
        self._write(document)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StateStoreError(f"Cannot read state file {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StateStoreError(f"State file {self.path} is not a JSON object")
        return document

    def _write(self, document: Dict[str, Any]) -> None:
        # Write to a sibling temp file and rename so a crash never leaves a
        # truncated document behind.
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(self.path)


class Ledger:
    """
    Append-only record of delivered screenshot identifiers.

    The persisted list is read once and then kept in memory; this process
    is the only writer, so ``record`` keeps both copies in step.
    """

    def __init__(self, store: JsonStateStore):
        self.store = store
        self._entries: Optional[List[str]] = None
        self._index: Set[str] = set()

    def exists(self) -> bool:
        return self.store.exists(LEDGER_KEY)

    def initialize(self) -> None:
        """Create an empty ledger on first run."""
        if not self.exists():
            logger.info(f"Creating empty delivery ledger at {self.store.path}")
            self.store.set(LEDGER_KEY, [])
            self._entries = None

    def entries(self) -> List[str]:
        """Get all delivered identifiers in the order they were recorded."""
        return list(self._load())

    def contains(self, identifier: str) -> bool:
        self._load()
        return identifier in self._index

    def record(self, identifier: str) -> None:
        """
        Append an identifier and persist it before returning.

        Recording an identifier that is already present is a no-op.
        """
        entries = self._load()
        if identifier in self._index:
            return
        self.store.set(LEDGER_KEY, entries + [identifier])
        entries.append(identifier)
        self._index.add(identifier)
        logger.debug(f"Recorded delivery: {identifier}")

    def _load(self) -> List[str]:
        if self._entries is None:
            entries = self.store.get(LEDGER_KEY, [])
            if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
                raise StateStoreError(f"'{LEDGER_KEY}' in {self.store.path} is not a list of strings")
            self._entries = entries
            self._index = set(entries)
        return self._entries
