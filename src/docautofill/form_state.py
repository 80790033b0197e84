"""Form-local auto-fill state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from docautofill.typing.models import ProcessedFieldSet


class AutoFilledFieldSet:
    """Keys filled by the last apply and not edited by the user since.

    Only used for highlighting; it never decides what gets written.
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: set[str] = set(keys)

    def mark(self, keys: Iterable[str]) -> None:
        """Add keys set by an apply."""
        self._keys.update(keys)

    def discard(self, key: str) -> None:
        """Forget a key the user changed or blurred."""
        self._keys.discard(key)

    def clear(self) -> None:
        """Forget every key."""
        self._keys.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._keys))

    def __len__(self) -> int:
        return len(self._keys)


class AutoFillForm:
    """Minimal in-memory form that can be bound to an auto-fill reconciler."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        """Initialize the form.

        Args:
            initial (Mapping[str, Any] | None): Initial field values.
        """
        self._values: dict[str, Any] = dict(initial or {})
        self._auto_filled = AutoFilledFieldSet()

    @property
    def values(self) -> dict[str, Any]:
        """Return a copy of the current field values."""
        return dict(self._values)

    @property
    def auto_filled(self) -> AutoFilledFieldSet:
        """Return the auto-filled key set."""
        return self._auto_filled

    def get_values(self) -> dict[str, Any]:
        """Return the current field values (usable as `get_form_values`)."""
        return self.values

    def apply(self, fields: ProcessedFieldSet) -> None:
        """Write processed fields into the form (usable as `apply_callback`).

        Args:
            fields (ProcessedFieldSet): Canonical key -> typed value.
        """
        self._values.update(fields)
        self._auto_filled.mark(fields)

    def change(self, key: str, value: Any) -> None:  # noqa: ANN401
        """Record a user edit of a field."""
        self._values[key] = value
        self._auto_filled.discard(key)

    def blur(self, key: str) -> None:
        """Record that the user left a field."""
        self._auto_filled.discard(key)

    def reset(self) -> None:
        """Empty the form."""
        self._values.clear()
        self._auto_filled.clear()

    def is_auto_filled(self, key: str) -> bool:
        """Return whether a field still holds an auto-filled value."""
        return key in self._auto_filled
