"""Auto-fill binding configuration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docautofill.typing.enums import FieldKind
from docautofill.typing.models.options import DropdownOption

ProcessedValue = str | int | float | bool
ProcessedFieldSet = dict[str, ProcessedValue]


class AutoFillConfig(BaseModel):
    """Configuration a form registers with its auto-fill reconciler."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    apply_callback: Callable[[ProcessedFieldSet], Any]
    form_type: str | None = None
    field_override_map: dict[str, str | None] = Field(default_factory=dict)
    dropdown_options_by_field: dict[str, list[DropdownOption]] = Field(default_factory=dict)
    field_kinds: dict[str, FieldKind] = Field(default_factory=dict)
    clear_after_apply: bool = False
    only_fill_empty: bool = False
    get_form_values: Callable[[], Mapping[str, Any]] | None = None
