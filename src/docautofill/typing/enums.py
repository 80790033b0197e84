"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldKind(_EnumMixin):
    """Semantic kind of a canonical form field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    MODE = "mode"


class StoreState(_EnumMixin):
    """Extraction store lifecycle state."""

    EMPTY = "empty"
    POPULATED = "populated"


class FormType(_EnumMixin):
    """Record schemas an extraction result can be mapped onto."""

    PAPERS = "papers"
    JOURNAL_ARTICLES = "journal-articles"
    BOOKS = "books"
    RESEARCH = "research"
    PATENTS = "patents"
    POLICY = "policy"
    ECONTENT = "econtent"
    CONSULTANCY = "consultancy"
    COLLABORATIONS = "collaborations"
    VISITS = "visits"
    FINANCIAL = "financial"
    JRF_SRF = "jrf-srf"
    PHD = "phd"
    COPYRIGHTS = "copyrights"
    REFRESHER = "refresher"
    ACADEMIC_PROGRAMS = "academic-programs"
    ACADEMIC_BODIES = "academic-bodies"
    COMMITTEES = "committees"
    PERFORMANCE = "performance"
    AWARDS = "awards"
    EXTENSION = "extension"
    TALKS = "talks"
    ARTICLES = "articles"
    ACADEMIC_BOOKS = "academic-books"
    MAGAZINES = "magazines"
    TECHNICAL = "technical"
