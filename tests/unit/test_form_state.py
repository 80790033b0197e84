from __future__ import annotations

from docautofill.form_state import AutoFilledFieldSet, AutoFillForm


def test_auto_filled_field_set_tracks_keys() -> None:
    keys = AutoFilledFieldSet()
    keys.mark(["title", "date"])

    assert "title" in keys
    assert len(keys) == 2

    keys.discard("title")
    keys.discard("missing")
    assert list(keys) == ["date"]

    keys.clear()
    assert len(keys) == 0


def test_apply_marks_fields_as_auto_filled() -> None:
    form = AutoFillForm({"title": ""})

    form.apply({"title": "Keynote", "date": "2024-02-01"})

    assert form.values == {"title": "Keynote", "date": "2024-02-01"}
    assert form.is_auto_filled("title")
    assert form.is_auto_filled("date")


def test_user_change_and_blur_remove_highlight() -> None:
    form = AutoFillForm()
    form.apply({"title": "Keynote", "date": "2024-02-01", "place": "Anand"})

    form.change("title", "Invited keynote")
    form.blur("date")

    assert form.values["title"] == "Invited keynote"
    assert not form.is_auto_filled("title")
    assert not form.is_auto_filled("date")
    assert form.is_auto_filled("place")


def test_reset_clears_values_and_highlights() -> None:
    form = AutoFillForm()
    form.apply({"title": "Keynote"})

    form.reset()

    assert form.values == {}
    assert len(form.auto_filled) == 0


def test_values_is_a_copy() -> None:
    form = AutoFillForm({"title": "Keynote"})
    form.get_values()["title"] = "changed"
    assert form.values["title"] == "Keynote"
