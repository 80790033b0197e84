from __future__ import annotations

import pytest

from docautofill.processing.field_kinds import infer_field_kind
from docautofill.typing.enums import FieldKind


def test_override_has_highest_priority() -> None:
    kinds = {"date_of_award": FieldKind.TEXT}
    assert infer_field_kind("awards", "date_of_award", overrides=kinds) == FieldKind.TEXT


def test_options_make_a_select_field() -> None:
    assert infer_field_kind("awards", "level", has_options=True) == FieldKind.SELECT


def test_form_type_hints() -> None:
    assert infer_field_kind("journal-articles", "peer_reviewed") == FieldKind.BOOLEAN
    assert infer_field_kind("journal-articles", "month_year") == FieldKind.DATE
    assert infer_field_kind("research", "grant_sanctioned") == FieldKind.NUMBER
    assert infer_field_kind("phd", "yearOfCompletion") == FieldKind.TEXT


def test_journal_page_and_volume_are_text() -> None:
    assert infer_field_kind("journal-articles", "page_num") == FieldKind.TEXT
    assert infer_field_kind("journal-articles", "volume_num") == FieldKind.TEXT
    assert infer_field_kind("journal-articles", "author_num") == FieldKind.NUMBER


@pytest.mark.parametrize(
    ("field_key", "expected"),
    [
        ("start_date", FieldKind.DATE),
        ("publishingDate", FieldKind.DATE),
        ("mode", FieldKind.MODE),
        ("mode_of_participation", FieldKind.MODE),
        ("in_scopus", FieldKind.BOOLEAN),
        ("has_attachment", FieldKind.BOOLEAN),
        ("author_num", FieldKind.NUMBER),
        ("chap_count", FieldKind.NUMBER),
        ("amount", FieldKind.NUMBER),
        ("title", FieldKind.TEXT),
    ],
)
def test_key_heuristics_without_form_type(field_key: str, expected: FieldKind) -> None:
    assert infer_field_kind("", field_key) == expected
