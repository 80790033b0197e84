"""Core domain model exports."""

from docautofill.typing.models.autofill import AutoFillConfig, ProcessedFieldSet, ProcessedValue
from docautofill.typing.models.extraction import (
    AnalysisPayload,
    Classification,
    ExtractionResult,
    UploadedFile,
)
from docautofill.typing.models.options import DropdownOption

__all__ = [
    "AnalysisPayload",
    "AutoFillConfig",
    "Classification",
    "DropdownOption",
    "ExtractionResult",
    "ProcessedFieldSet",
    "ProcessedValue",
    "UploadedFile",
]
