"""Session-scoped key/value storage backends."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from docautofill import logger
from docautofill.exceptions import StorageError, StorageQuotaError

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


def _entries_size(entries: dict[str, str]) -> int:
    """Return the storage footprint of entries, counted like a browser quota (UTF-16)."""
    return sum(2 * (len(key) + len(value)) for key, value in entries.items())


class InMemorySessionStorage:
    """Process-local storage with a byte quota.

    Values do not survive the process; use it where the hosting process is
    the session.
    """

    def __init__(self, *, quota_bytes: int | None = DEFAULT_QUOTA_BYTES) -> None:
        """Initialize storage.

        Args:
            quota_bytes (int | None): Maximum footprint, None for unlimited.
        """
        self._entries: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self._entries.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key.

        Args:
            key (str): Storage key.
            value (str): Serialized value.

        Raises:
            StorageQuotaError: If the write would exceed the quota.
        """
        candidate = {**self._entries, key: value}
        if self._quota_bytes is not None and _entries_size(candidate) > self._quota_bytes:
            raise StorageQuotaError(message=f"Storage quota exceeded writing '{key}'", limit_bytes=self._quota_bytes)
        self._entries[key] = value

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""
        return iter(list(self._entries))


class JsonFileSessionStorage(BaseModel):
    """File-backed storage that survives a process restart.

    The file is read once at construction and rewritten on every change.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    path: Path = Field(description="JSON file holding the entries.")
    quota_bytes: int | None = Field(default=DEFAULT_QUOTA_BYTES, description="Maximum footprint.")
    _entries: dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: object, /) -> None:
        """Load existing entries after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self._entries = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Session store file unreadable, starting empty", extra={"path": str(self.path)})
            return {}
        if not isinstance(payload, dict):
            logger.warning("Session store file is not a JSON object, starting empty", extra={"path": str(self.path)})
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _flush(self, entries: dict[str, str]) -> None:
        """Write entries to disk, replacing the file atomically.

        Args:
            entries (dict[str, str]): Entries to persist.

        Raises:
            StorageError: If the file cannot be written.
        """
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(entries, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StorageError(message=f"Cannot write session store {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self._entries.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key.

        Args:
            key (str): Storage key.
            value (str): Serialized value.

        Raises:
            StorageQuotaError: If the write would exceed the quota.
        """
        candidate = {**self._entries, key: value}
        if self.quota_bytes is not None and _entries_size(candidate) > self.quota_bytes:
            raise StorageQuotaError(message=f"Storage quota exceeded writing '{key}'", limit_bytes=self.quota_bytes)
        self._flush(candidate)
        self._entries = candidate

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        if key not in self._entries:
            return
        remaining = {name: value for name, value in self._entries.items() if name != key}
        self._flush(remaining)
        self._entries = remaining

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""
        return iter(list(self._entries))
