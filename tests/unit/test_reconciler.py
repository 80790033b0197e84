from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from docautofill.extraction_store import ExtractionStore
from docautofill.reconciler import AutoFillReconciler, bind_form, fingerprint_data_fields
from docautofill.storage import InMemorySessionStorage
from docautofill.typing.models import AutoFillConfig, DropdownOption, ExtractionResult

if TYPE_CHECKING:
    from docautofill.typing.models import ProcessedFieldSet


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[ProcessedFieldSet] = []

    def __call__(self, fields: ProcessedFieldSet) -> None:
        self.calls.append(fields)


def _with_fields(result: ExtractionResult, **changes: str) -> ExtractionResult:
    return result.model_copy(update={"data_fields": {**result.data_fields, **changes}})


def test_fingerprint_ignores_key_order() -> None:
    assert fingerprint_data_fields({"a": "1", "b": "2"}) == fingerprint_data_fields({"b": "2", "a": "1"})
    assert fingerprint_data_fields({"a": "1"}) != fingerprint_data_fields({"a": "2"})


def test_empty_store_is_a_noop(store: ExtractionStore) -> None:
    recorder = _Recorder()
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))

    assert reconciler.evaluate() is False
    assert reconciler.apply_now() is False
    assert recorder.calls == []
    assert reconciler.processed_fields == {}
    assert reconciler.raw_fields == {}
    assert reconciler.category == ""
    assert reconciler.form_type == ""


def test_evaluate_is_idempotent(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))

    assert reconciler.evaluate() is True
    assert reconciler.evaluate() is False
    assert reconciler.evaluate() is False

    assert len(recorder.calls) == 1
    assert recorder.calls[0]["date_of_award"] == "2023-03-15"


def test_changed_field_triggers_exactly_one_new_apply(
    store: ExtractionStore,
    award_result: ExtractionResult,
) -> None:
    recorder = _Recorder()
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.evaluate()

    store.set(_with_fields(award_result, Details="Updated details"))
    reconciler.evaluate()
    reconciler.evaluate()

    assert len(recorder.calls) == 2
    assert recorder.calls[1]["details"] == "Updated details"


def test_stale_result_is_not_reapplied(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.evaluate()

    store.set(award_result.model_copy(update={"auto_fill": False}))

    assert reconciler.evaluate() is False
    assert len(recorder.calls) == 1


def test_apply_now_bypasses_fingerprint(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.evaluate()

    assert reconciler.apply_now() is True
    assert reconciler.evaluate() is False
    assert len(recorder.calls) == 2


def test_form_type_from_config_overrides_classification(
    store: ExtractionStore,
    award_result: ExtractionResult,
) -> None:
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=_Recorder(), form_type="talks"))

    assert reconciler.form_type == "talks"
    assert reconciler.processed_fields["date"] == "2023-03-15"
    assert "date_of_award" not in reconciler.processed_fields


def test_form_type_resolved_from_store(store: ExtractionStore, award_result: ExtractionResult) -> None:
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=_Recorder()))

    assert reconciler.form_type == "awards"
    assert reconciler.category == "Awards/Performance"
    assert reconciler.sub_category == "Awards/Fellowship/Recognition"
    assert reconciler.auto_fill is True
    assert reconciler.document_url == "data:application/pdf;base64,JVBERi0="
    assert reconciler.raw_fields == award_result.data_fields


def test_dropdown_options_are_consulted(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)
    config = AutoFillConfig(
        apply_callback=recorder,
        dropdown_options_by_field={
            "level": [DropdownOption(id=1, name="National"), DropdownOption(id=2, name="International")],
        },
    )

    AutoFillReconciler(store, config).evaluate()

    assert recorder.calls[0]["level"] == 2


def test_clear_after_apply_empties_store(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder, clear_after_apply=True))

    assert reconciler.evaluate() is True

    assert store.has_data is False
    assert reconciler.has_data is False
    assert reconciler.last_fingerprint is None


def test_reentrant_evaluate_does_not_loop(store: ExtractionStore, award_result: ExtractionResult) -> None:
    calls: list[ProcessedFieldSet] = []
    holder: dict[str, AutoFillReconciler] = {}

    def _apply(fields: ProcessedFieldSet) -> None:
        calls.append(fields)
        holder["reconciler"].evaluate()

    store.set(award_result)
    holder["reconciler"] = AutoFillReconciler(store, AutoFillConfig(apply_callback=_apply))

    assert holder["reconciler"].evaluate() is True
    assert len(calls) == 1


def test_failing_callback_is_retried_on_next_evaluation(
    store: ExtractionStore,
    award_result: ExtractionResult,
) -> None:
    attempts: list[ProcessedFieldSet] = []

    def _apply(fields: ProcessedFieldSet) -> None:
        attempts.append(fields)
        if len(attempts) == 1:
            raise RuntimeError("form not ready")

    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=_apply))

    assert reconciler.evaluate() is False
    assert reconciler.last_fingerprint is None
    assert reconciler.evaluate() is True
    assert len(attempts) == 2


def test_blank_only_fields_do_not_apply(store: ExtractionStore) -> None:
    recorder = _Recorder()
    store.set(ExtractionResult(category="Talks", data_fields={"Title": "  "}))

    assert AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder)).evaluate() is False
    assert recorder.calls == []


def test_only_fill_empty_keeps_user_values(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    current: dict[str, Any] = {"name": "Typed by user", "details": "   ", "level": None}
    store.set(award_result)
    config = AutoFillConfig(apply_callback=recorder, only_fill_empty=True, get_form_values=lambda: current)

    AutoFillReconciler(store, config).evaluate()

    applied = recorder.calls[0]
    assert "name" not in applied
    assert applied["details"] == "Awarded for the best paper in the AI track"
    assert applied["level"] == "International conference"


def test_attach_applies_on_store_change(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.attach()
    reconciler.attach()

    store.set(award_result)
    store.set(award_result)

    assert len(recorder.calls) == 1


def test_same_result_is_reapplied_after_clear(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.attach()

    store.set(award_result)
    store.clear()
    store.set(award_result)

    assert len(recorder.calls) == 2


def test_detach_stops_following_store(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=recorder))
    reconciler.attach()
    reconciler.detach()

    store.set(award_result)

    assert recorder.calls == []


def test_detach_can_clear_store(store: ExtractionStore, award_result: ExtractionResult) -> None:
    store.set(award_result)
    reconciler = bind_form(store, AutoFillConfig(apply_callback=_Recorder()))

    reconciler.detach(clear_store=True)

    assert store.has_data is False


def test_bind_form_applies_existing_result(store: ExtractionStore, award_result: ExtractionResult) -> None:
    recorder = _Recorder()
    store.set(award_result)

    binding = bind_form(store, AutoFillConfig(apply_callback=recorder))

    assert binding.has_data is True
    assert len(recorder.calls) == 1
    assert binding.processed_fields == recorder.calls[0]


def test_clear_propagates_to_later_bindings(award_result: ExtractionResult) -> None:
    storage = InMemorySessionStorage()
    store = ExtractionStore(storage)
    store.set(award_result)
    binding = bind_form(store, AutoFillConfig(apply_callback=_Recorder()))

    binding.clear()

    later = bind_form(ExtractionStore(storage), AutoFillConfig(apply_callback=_Recorder()))
    assert later.has_data is False
    assert later.processed_fields == {}
    assert list(storage.keys()) == []


@pytest.mark.parametrize("min_year", [2023, 2050])
def test_date_window_is_configurable(store: ExtractionStore, award_result: ExtractionResult, min_year: int) -> None:
    store.set(award_result)
    reconciler = AutoFillReconciler(store, AutoFillConfig(apply_callback=_Recorder()), min_year=min_year)

    assert reconciler.processed_fields["date_of_award"] == "15th March 2023"
