"""Auto-fill reconciliation between the extraction store and an open form."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

from docautofill import logger
from docautofill.processing.field_mapping import resolve_form_type
from docautofill.processing.normalization import DEFAULT_MAX_YEAR, DEFAULT_MIN_YEAR
from docautofill.processing.processed_fields import build_processed_fields

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from docautofill.extraction_store import ExtractionStore
    from docautofill.typing.models import AutoFillConfig, ExtractionResult, ProcessedFieldSet


def fingerprint_data_fields(data_fields: Mapping[str, str]) -> str:
    """Return a deterministic content hash of a raw field bag.

    Args:
        data_fields (Mapping[str, str]): Raw label -> text pairs.

    Returns:
        str: Hex digest, independent of key order.
    """
    payload = json.dumps(dict(data_fields), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _is_empty_value(value: Any) -> bool:  # noqa: ANN401
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class AutoFillReconciler:
    """Applies the stored extraction result to one form instance.

    `evaluate` is safe to call on any event (form mounted, store changed,
    field blurred): the callback runs only when the raw field bag differs
    from the last one successfully applied.
    """

    def __init__(
        self,
        store: ExtractionStore,
        config: AutoFillConfig,
        *,
        min_year: int = DEFAULT_MIN_YEAR,
        max_year: int = DEFAULT_MAX_YEAR,
    ) -> None:
        """Initialize the reconciler.

        Args:
            store (ExtractionStore): Shared extraction store.
            config (AutoFillConfig): Form binding configuration.
            min_year (int): Lower date bound (exclusive).
            max_year (int): Upper date bound (exclusive).
        """
        self._store = store
        self._config = config
        self._min_year = min_year
        self._max_year = max_year
        self._last_fingerprint: str | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def last_fingerprint(self) -> str | None:
        """Return the fingerprint of the last successfully applied field bag."""
        return self._last_fingerprint

    @property
    def form_type(self) -> str:
        """Return the effective form type, empty when unknown."""
        if self._config.form_type:
            return self._config.form_type
        result = self._store.get()
        if result is None:
            return ""
        return resolve_form_type(result.category, result.sub_category)

    @property
    def processed_fields(self) -> ProcessedFieldSet:
        """Return the typed field set of the stored result for this form."""
        result = self._store.get()
        if result is None:
            return {}
        return self._build(result)

    @property
    def raw_fields(self) -> dict[str, str]:
        """Return a copy of the stored raw field bag."""
        result = self._store.get()
        return dict(result.data_fields) if result is not None else {}

    @property
    def category(self) -> str:
        """Return the stored category."""
        result = self._store.get()
        return result.category if result is not None else ""

    @property
    def sub_category(self) -> str:
        """Return the stored subcategory."""
        result = self._store.get()
        return result.sub_category if result is not None else ""

    @property
    def has_data(self) -> bool:
        """Return whether the store holds a result."""
        return self._store.has_data

    @property
    def document_url(self) -> str | None:
        """Return the content handle of the uploaded document."""
        return self._store.document_url

    @property
    def auto_fill(self) -> bool:
        """Return the auto-fill intent of the stored result."""
        result = self._store.get()
        return result.auto_fill if result is not None else False

    def evaluate(self) -> bool:
        """Apply the stored result if it was not applied yet.

        Returns:
            bool: True when the apply callback ran successfully.
        """
        result = self._store.get()
        if result is None:
            return False

        fingerprint = fingerprint_data_fields(result.data_fields)
        if fingerprint == self._last_fingerprint:
            logger.debug(
                "Auto-fill skipped, fields already applied",
                extra={"form_type": self.form_type, "fingerprint": fingerprint[:12]},
            )
            return False
        return self._apply(result, fingerprint)

    def apply_now(self) -> bool:
        """Apply the stored result regardless of what was applied before.

        Returns:
            bool: True when the apply callback ran successfully.
        """
        result = self._store.get()
        if result is None:
            return False
        return self._apply(result, fingerprint_data_fields(result.data_fields))

    def clear(self) -> None:
        """Clear the shared store and forget the last applied fingerprint."""
        self._last_fingerprint = None
        self._store.clear()

    def attach(self) -> None:
        """Re-evaluate on every store change until `detach` is called."""
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_store_change)

    def detach(self, *, clear_store: bool = False) -> None:
        """Stop following store changes.

        Args:
            clear_store (bool): Also clear the shared store.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if clear_store:
            self.clear()

    def _on_store_change(self, result: ExtractionResult | None) -> None:
        if result is None:
            self._last_fingerprint = None
            return
        self.evaluate()

    def _build(self, result: ExtractionResult) -> ProcessedFieldSet:
        return build_processed_fields(
            result.data_fields,
            form_type=self.form_type,
            overrides=self._config.field_override_map,
            dropdown_options_by_field=self._config.dropdown_options_by_field,
            field_kinds=self._config.field_kinds,
            min_year=self._min_year,
            max_year=self._max_year,
        )

    def _drop_filled(self, fields: ProcessedFieldSet) -> ProcessedFieldSet:
        if not self._config.only_fill_empty or self._config.get_form_values is None:
            return fields
        current = self._config.get_form_values()
        return {key: value for key, value in fields.items() if _is_empty_value(current.get(key))}

    def _apply(self, result: ExtractionResult, fingerprint: str) -> bool:
        form_type = self.form_type
        fields = self._build(result)
        if not fields:
            logger.info("Auto-fill skipped, no usable fields", extra={"form_type": form_type})
            return False

        # Recorded before the callback runs so a re-entrant evaluate() is a no-op.
        previous = self._last_fingerprint
        self._last_fingerprint = fingerprint
        try:
            applied = self._drop_filled(fields)
            self._config.apply_callback(applied)
        except Exception:
            self._last_fingerprint = previous
            logger.exception("Auto-fill callback failed", extra={"form_type": form_type})
            return False

        logger.info(
            "Auto-fill applied",
            extra={
                "form_type": form_type,
                "fields": len(applied),
                "skipped": len(fields) - len(applied),
                "fingerprint": fingerprint[:12],
            },
        )
        if self._config.clear_after_apply:
            self._store.clear()
            self._last_fingerprint = None
        return True


def bind_form(
    store: ExtractionStore,
    config: AutoFillConfig,
    *,
    min_year: int = DEFAULT_MIN_YEAR,
    max_year: int = DEFAULT_MAX_YEAR,
) -> AutoFillReconciler:
    """Bind a form to the store and run the initial evaluation.

    Args:
        store (ExtractionStore): Shared extraction store.
        config (AutoFillConfig): Form binding configuration.
        min_year (int): Lower date bound (exclusive).
        max_year (int): Upper date bound (exclusive).

    Returns:
        AutoFillReconciler: Attached reconciler acting as the form binding.
    """
    reconciler = AutoFillReconciler(store, config, min_year=min_year, max_year=max_year)
    reconciler.attach()
    reconciler.evaluate()
    return reconciler
