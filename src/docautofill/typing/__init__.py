"""Typing-centric domain modules."""

from docautofill.typing.enums import FieldKind, FormType, StoreState
from docautofill.typing.models import (
    AnalysisPayload,
    AutoFillConfig,
    Classification,
    DropdownOption,
    ExtractionResult,
    ProcessedFieldSet,
    ProcessedValue,
    UploadedFile,
)
from docautofill.typing.protocol import SessionStorage, StoreListener

__all__ = [
    "AnalysisPayload",
    "AutoFillConfig",
    "Classification",
    "DropdownOption",
    "ExtractionResult",
    "FieldKind",
    "FormType",
    "ProcessedFieldSet",
    "ProcessedValue",
    "SessionStorage",
    "StoreListener",
    "StoreState",
    "UploadedFile",
]
