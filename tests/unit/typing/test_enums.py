from __future__ import annotations

import pytest

from docautofill.typing.enums import FieldKind, FormType, StoreState


def test_field_kind_from_str() -> None:
    assert FieldKind.from_str("date") == FieldKind.DATE


def test_field_kind_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported FieldKind value"):
        FieldKind.from_str("currency")


def test_form_type_values_are_plain_strings() -> None:
    assert FormType.JRF_SRF.to_str() == "jrf-srf"
    assert FormType("academic-books") == FormType.ACADEMIC_BOOKS
    assert FormType.AWARDS == "awards"


def test_store_state_values() -> None:
    assert [state.value for state in StoreState] == ["empty", "populated"]
