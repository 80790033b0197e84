"""Build the typed field set of an extraction result for one form type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docautofill.processing.field_kinds import infer_field_kind
from docautofill.processing.field_mapping import map_field_name
from docautofill.processing.normalization import DEFAULT_MAX_YEAR, DEFAULT_MIN_YEAR, normalize_typed_value

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from docautofill.typing.enums import FieldKind
    from docautofill.typing.models import DropdownOption, ProcessedFieldSet


def build_processed_fields(  # noqa: PLR0913
    data_fields: Mapping[str, str],
    *,
    form_type: str = "",
    overrides: Mapping[str, str | None] | None = None,
    dropdown_options_by_field: Mapping[str, Sequence[DropdownOption]] | None = None,
    field_kinds: Mapping[str, FieldKind] | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_year: int = DEFAULT_MAX_YEAR,
) -> ProcessedFieldSet:
    """Map and normalize every raw field of an extraction result.

    Blank raw values are skipped. When several labels land on the same key,
    the first non-blank value wins. The raw mapping is never modified.

    Args:
        data_fields (Mapping[str, str]): Raw label -> text pairs.
        form_type (str): Form type; empty disables the static mapping tier.
        overrides (Mapping[str, str | None] | None): Per-form label overrides.
        dropdown_options_by_field (Mapping[str, Sequence[DropdownOption]] | None): Options per canonical key.
        field_kinds (Mapping[str, FieldKind] | None): Kinds declared by the form.
        min_year (int): Lower date bound (exclusive).
        max_year (int): Upper date bound (exclusive).

    Returns:
        ProcessedFieldSet: Canonical key -> typed value.
    """
    options_by_field = dropdown_options_by_field or {}
    processed: ProcessedFieldSet = {}

    for label, raw_value in data_fields.items():
        if not raw_value or not raw_value.strip():
            continue
        key = map_field_name(form_type, label, overrides)
        if key is None or key in processed:
            continue

        options = options_by_field.get(key)
        kind = infer_field_kind(form_type, key, overrides=field_kinds, has_options=bool(options))
        processed[key] = normalize_typed_value(
            value=raw_value,
            field_key=key,
            kind=kind,
            options=options,
            min_year=min_year,
            max_year=max_year,
        )

    return processed
