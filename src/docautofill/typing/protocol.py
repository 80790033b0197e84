"""Ports consumed by the extraction store and reconciler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from docautofill.typing.models import ExtractionResult


class SessionStorage(Protocol):
    """Durable, session-scoped key/value store (strings in, strings out)."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key.

        Args:
            key: Storage key.

        Returns:
            str | None: Stored value, or None when absent.
        """

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key.

        Args:
            key: Storage key.
            value: Serialized value.
        """

    def remove_item(self, key: str) -> None:
        """Remove a key if present.

        Args:
            key: Storage key.
        """

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys.

        Returns:
            Iterator[str]: Stored keys.
        """


class StoreListener(Protocol):
    """Callback notified after the extraction store changes."""

    def __call__(self, result: ExtractionResult | None) -> None:
        """Handle a store change.

        Args:
            result: Current result, or None once cleared.
        """
