"""Extraction service payload and extraction result models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _coerce_raw_fields(value: object) -> object:
    """Coerce a raw field bag into label -> string pairs.

    Args:
        value (object): Raw `dataFields` payload.

    Returns:
        object: Mapping with string values, or the input untouched when it is not a mapping.
    """
    if not isinstance(value, dict):
        return value
    return {str(key): "" if raw is None else str(raw) for key, raw in value.items()}


class UploadedFile(BaseModel):
    """Reference to an uploaded artifact."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data_url: str = Field(description="Opaque content handle, usually a `data:` URL.")
    name: str
    media_type: str


class Classification(BaseModel):
    """Classification block of an extraction service response."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    category: str = ""
    sub_category: str | None = Field(
        default=None,
        validation_alias=AliasChoices("sub-category", "subCategory", "sub_category"),
        serialization_alias="sub-category",
    )
    data_fields: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("dataFields", "data_fields"),
        serialization_alias="dataFields",
    )

    @field_validator("data_fields", mode="before")
    @classmethod
    def _validate_data_fields(cls, value: object) -> object:
        """Keep raw field values as strings.

        Args:
            value (object): Raw field bag.

        Returns:
            object: Field bag with string values.
        """
        return _coerce_raw_fields(value)


class AnalysisPayload(BaseModel):
    """Full extraction service response, kept verbatim for audit."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = False
    classification: Classification = Field(default_factory=Classification)
    extracted_text: str = Field(
        default="",
        validation_alias=AliasChoices("extractedText", "extracted_text"),
        serialization_alias="extractedText",
    )
    file_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fileType", "file_type"),
        serialization_alias="fileType",
    )
    file_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fileName", "file_name"),
        serialization_alias="fileName",
    )
    timestamp: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the payload in the service's own key vocabulary."""
        return self.model_dump(mode="json", by_alias=True)


class ExtractionResult(BaseModel):
    """Most recent extraction result held by the extraction store.

    `data_fields` keeps the raw strings as received. Type coercion happens
    downstream and is never written back here.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    file: UploadedFile | None = None
    category: str = ""
    sub_category: str = ""
    data_fields: dict[str, str] = Field(default_factory=dict)
    analysis: AnalysisPayload | None = None
    auto_fill: bool = False

    @field_validator("data_fields", mode="before")
    @classmethod
    def _validate_data_fields(cls, value: object) -> object:
        """Keep raw field values as strings.

        Args:
            value (object): Raw field bag.

        Returns:
            object: Field bag with string values.
        """
        return _coerce_raw_fields(value)

    @classmethod
    def from_analysis(
        cls,
        analysis: AnalysisPayload,
        *,
        file: UploadedFile | None = None,
        auto_fill: bool = True,
    ) -> ExtractionResult:
        """Build a result from an extraction service response.

        Args:
            analysis (AnalysisPayload): Validated service response.
            file (UploadedFile | None): Uploaded artifact reference.
            auto_fill (bool): Whether the caller wants the result auto-applied.

        Returns:
            ExtractionResult: Store-ready result.
        """
        classification = analysis.classification
        return cls(
            file=file,
            category=classification.category,
            sub_category=classification.sub_category or "",
            data_fields=dict(classification.data_fields),
            analysis=analysis,
            auto_fill=auto_fill,
        )
