"""
Local key-value storage for the fitness document.

Adapters read and write one JSON blob per key. Neither `load` nor `save`
raises: a missing or unreadable slot yields the caller's fallback, and a
failed write is logged and dropped so tracking keeps working in memory.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from fitness_ledger.utils.exceptions import PersistenceUnavailableError

logger = logging.getLogger(__name__)


class StorageAdapter(ABC):
    """Durable storage for whole JSON documents addressed by key."""

    @abstractmethod
    def read_raw(self, key: str) -> str | None:
        """
        Read the raw text stored under `key`.

        Returns:
            Stored text, or None if the slot is empty.

        Raises:
            PersistenceUnavailableError: If the medium cannot be read.
        """

    @abstractmethod
    def write_raw(self, key: str, text: str) -> None:
        """
        Replace the text stored under `key`.

        Raises:
            PersistenceUnavailableError: If the medium cannot be written.
        """

    def load(self, key: str, fallback: Any) -> Any:
        """
        Load and deserialize the document stored under `key`.

        Args:
            key: Storage slot name.
            fallback: Value returned unchanged when the slot is absent or unusable.

        Returns:
            Parsed JSON value, or `fallback`.
        """
        try:
            raw = self.read_raw(key)
        except PersistenceUnavailableError as e:
            logger.warning(f"Storage read failed for {key!r}, using fallback: {e}")
            return fallback

        if not raw:
            logger.debug(f"No stored data for {key!r}")
            return fallback

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored data for {key!r} is not valid JSON, using fallback: {e}")
            return fallback

    def save(self, key: str, document: Any) -> bool:
        """
        Serialize and store `document` under `key`.

        Args:
            key: Storage slot name.
            document: JSON-compatible value.

        Returns:
            True if the write succeeded, False if it failed and was logged.
        """
        try:
            text = json.dumps(document)
            self.write_raw(key, text)
        except (PersistenceUnavailableError, OSError, TypeError, ValueError) as e:
            logger.warning(f"Storage write failed for {key!r}: {e}")
            return False

        return True


class InMemoryStorage(StorageAdapter):
    """Process-local storage, mainly for tests."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False) -> None:
        """
        Initialize in-memory storage.

        Args:
            fail_reads: Simulate an unreadable medium.
            fail_writes: Simulate an unwritable medium.
        """
        self.slots: dict[str, str] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def read_raw(self, key: str) -> str | None:
        if self.fail_reads:
            raise PersistenceUnavailableError("in-memory storage is configured to fail reads")
        return self.slots.get(key)

    def write_raw(self, key: str, text: str) -> None:
        if self.fail_writes:
            raise PersistenceUnavailableError("in-memory storage is configured to fail writes")
        self.slots[key] = text


class JsonFileStorage(StorageAdapter):
    """
    File-backed storage keeping each slot in `<directory>/<key>.json`.

    Writes go through a temporary file in the same directory and are moved
    into place, so an interrupted write leaves the previous blob intact.
    """

    def __init__(self, directory: str | Path) -> None:
        """
        Initialize file storage.

        Args:
            directory: Directory holding the slot files. Created on first write.
        """
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Get the file path backing a slot."""
        return self.directory / f"{key}.json"

    def read_raw(self, key: str) -> str | None:
        path = self.path_for(key)

        if not path.exists():
            return None

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceUnavailableError(f"Failed to read {path}: {e}") from e

    def write_raw(self, key: str, text: str) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None

        try:
            self.directory.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                f.write(text)

            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug(f"Wrote {len(text)} bytes to {path}")

        except OSError as e:
            raise PersistenceUnavailableError(f"Failed to write {path}: {e}") from e

        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
