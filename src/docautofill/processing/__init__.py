"""Field mapping and value normalization."""

from docautofill.processing.display_names import category_display_name, sub_category_display_name
from docautofill.processing.field_kinds import infer_field_kind
from docautofill.processing.field_mapping import map_field_name, resolve_form_type
from docautofill.processing.normalization import (
    find_dropdown_option,
    normalize_boolean,
    normalize_date,
    normalize_mode,
    normalize_number,
    normalize_typed_value,
)
from docautofill.processing.processed_fields import build_processed_fields

__all__ = [
    "build_processed_fields",
    "category_display_name",
    "find_dropdown_option",
    "infer_field_kind",
    "map_field_name",
    "normalize_boolean",
    "normalize_date",
    "normalize_mode",
    "normalize_number",
    "normalize_typed_value",
    "resolve_form_type",
    "sub_category_display_name",
]
