"""Pytest marker auto-assignment by folder and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from docautofill import logger
from docautofill.extraction_store import ExtractionStore
from docautofill.storage import InMemorySessionStorage
from docautofill.typing.models import AnalysisPayload, ExtractionResult, UploadedFile


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                "Could not resolve test path, skipping marker",
                extra={"test": item.name, "marker": marker},
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def award_fields() -> dict[str, str]:
    """Raw fields of an award certificate as returned by the extraction service."""
    return {
        "Name of Award / Fellowship": "Best Paper Award",
        "Name of Awarding Agency": "IEEE Gujarat Section",
        "Date of Award": "15th March 2023",
        "Level": "International conference",
        "Details": "Awarded for the best paper in the AI track",
    }


@pytest.fixture
def award_result(award_fields: dict[str, str]) -> ExtractionResult:
    """Extraction result classified as an award."""
    return ExtractionResult(
        file=UploadedFile(
            data_url="data:application/pdf;base64,JVBERi0=",
            name="award.pdf",
            media_type="application/pdf",
        ),
        category="Awards/Performance",
        sub_category="Awards/Fellowship/Recognition",
        data_fields=award_fields,
        analysis=AnalysisPayload.model_validate(
            {
                "success": True,
                "classification": {
                    "category": "Awards/Performance",
                    "sub-category": "Awards/Fellowship/Recognition",
                    "dataFields": award_fields,
                },
                "extractedText": "Certificate of excellence ...",
                "fileType": "application/pdf",
                "fileName": "award.pdf",
                "timestamp": "2024-01-10T10:00:00Z",
            },
        ),
        auto_fill=True,
    )


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    """Empty in-memory session storage."""
    return InMemorySessionStorage()


@pytest.fixture
def store(session_storage: InMemorySessionStorage) -> ExtractionStore:
    """Empty extraction store over in-memory storage."""
    return ExtractionStore(session_storage)
