"""Typed field value normalization helpers.

Every normalizer takes the raw extracted string and returns a typed value,
or None when no confident conversion exists. None means "leave the raw
string to the caller's own field validation".
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import TYPE_CHECKING

from dateutil import parser as date_parser

from docautofill.typing.enums import FieldKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docautofill.typing.models import DropdownOption, ProcessedValue

DEFAULT_MIN_YEAR = 1900
DEFAULT_MAX_YEAR = 2100

# Negative phrases are checked before affirmative tokens so that
# "not reviewed" or "not in scopus" never resolve through "reviewed"/"in".
_FALSE_TOKENS: tuple[str, ...] = ("not reviewed", "unpaid", "false", "not", "out", "no")
_TRUE_TOKENS: tuple[str, ...] = ("reviewed", "included", "paid", "true", "yes", "in")
# Single-character answers only count when they are the whole value.
_SHORT_ANSWERS: dict[str, bool] = {"n": False, "0": False, "y": True, "1": True}

_LEVEL_SYNONYMS: dict[str, tuple[str, ...]] = {
    "international": ("international", "global", "world", "abroad"),
    "national": ("national", "nation", "country", "india"),
    "state": ("state", "provincial", "regional"),
    "university": ("university", "institutional", "institute"),
    "college": ("college", "department", "departmental"),
    "local": ("local", "district", "city"),
}

_MODE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "Hybrid": ("hybrid", "blended"),
    "Virtual": ("virtual", "online", "webinar"),
    "Physical": ("physical", "offline", "in person"),
}

_ORDINAL_SUFFIX = re.compile(r"(\d+)(st|nd|rd|th)\b", re.IGNORECASE)
_NUMERIC_DATE = re.compile(r"^(\d{1,2})([/.-])(\d{1,2})\2(\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})([-/.])(\d{1,2})\2(\d{1,2})(?:[T ].*)?$")
_YEAR_TOKEN = re.compile(r"\b\d{4}\b")
_CURRENCY_PREFIX = re.compile(r"^(?:rs\.?|inr|usd|eur|[₹$€£])\s*", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{2,3}\b)|(?<=\d) (?=\d{3}\b)")


def normalize_text(value: str) -> str:
    """Normalize text for matching: lowercase, alphanumerics only, single spaces.

    Args:
        value (str): Raw text.

    Returns:
        str: Comparable text.
    """
    lowered = re.sub(r"[^a-z0-9\s]", "", value.lower())
    return " ".join(lowered.split())


def _contains_phrase(haystack: str, needle: str) -> bool:
    """Return whether `needle` appears in `haystack` as whole words."""
    if not needle:
        return False
    return f" {needle} " in f" {haystack} "


def normalize_date(
    value: str,
    field_key: str = "",  # noqa: ARG001
    *,
    min_year: int = DEFAULT_MIN_YEAR,
    max_year: int = DEFAULT_MAX_YEAR,
) -> str | None:
    """Parse a human date into ISO `YYYY-MM-DD`.

    Year-first forms (`yyyy-mm-dd`, also `/` and `.` separated) are read as
    year, month, day. Numeric `a/b/yyyy` forms are read day-first, then
    month-first when the day-first reading is not a calendar date.
    Month-name forms go through `dateutil`. Future dates are accepted.

    Args:
        value (str): Raw extracted text.
        field_key (str): Target field key (unused, kept for the shared signature).
        min_year (int): Years at or below are rejected.
        max_year (int): Years at or above are rejected.

    Returns:
        str | None: ISO date, or None when the text is not a valid calendar date.
    """
    cleaned = _ORDINAL_SUFFIX.sub(r"\1", value).strip().rstrip(".")
    if not cleaned:
        return None

    parsed = _parse_date(cleaned)
    if parsed is None or not min_year < parsed.year < max_year:
        return None
    return parsed.isoformat()


def _parse_date(value: str) -> date | None:
    # Numeric shapes are parsed strictly and never reach dateutil.
    if _ISO_DATE.match(value):
        return _parse_iso_date(value)
    if _NUMERIC_DATE.match(value):
        return _parse_numeric_date(value)
    return _parse_worded_date(value)


def _parse_iso_date(value: str) -> date | None:
    match = _ISO_DATE.match(value)
    if match is None:
        return None
    return _safe_date(int(match.group(1)), int(match.group(3)), int(match.group(4)))


def _parse_numeric_date(value: str) -> date | None:
    match = _NUMERIC_DATE.match(value)
    if match is None:
        return None
    first, second, year = int(match.group(1)), int(match.group(3)), int(match.group(4))
    return _safe_date(year, second, first) or _safe_date(year, first, second)


def _parse_worded_date(value: str) -> date | None:
    if not _YEAR_TOKEN.search(value):
        return None
    try:
        parsed = date_parser.parse(value, dayfirst=True, default=datetime(2000, 1, 1))  # noqa: DTZ001
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_boolean(value: str, field_key: str = "") -> bool | None:  # noqa: ARG001
    """Map affirmative/negative wording to a boolean.

    Tokens are matched as whole words, negative phrases first. `y`, `n`,
    `1` and `0` only count as the entire answer.

    Args:
        value (str): Raw extracted text.
        field_key (str): Target field key (unused, kept for the shared signature).

    Returns:
        bool | None: Parsed flag, or None for unrecognized text.
    """
    normalized = normalize_text(value)
    if not normalized:
        return None
    if normalized in _SHORT_ANSWERS:
        return _SHORT_ANSWERS[normalized]
    if any(_contains_phrase(normalized, token) for token in _FALSE_TOKENS):
        return False
    if any(_contains_phrase(normalized, token) for token in _TRUE_TOKENS):
        return True
    return None


def normalize_number(value: str, field_key: str = "") -> int | float | None:  # noqa: ARG001
    """Parse the leading number of a raw value.

    Thousands separators and a leading currency marker are ignored, so
    `"Rs. 1,50,000"` gives 150000 and `"9 months"` gives 9.

    Args:
        value (str): Raw extracted text.
        field_key (str): Target field key (unused, kept for the shared signature).

    Returns:
        int | float | None: Parsed number, int when integral; None when no number leads the text.
    """
    compact = _CURRENCY_PREFIX.sub("", value.strip())
    compact = _THOUSANDS_SEPARATOR.sub("", compact)
    match = _LEADING_NUMBER.match(compact)
    if match is None:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def normalize_mode(value: str, field_key: str = "") -> str | None:  # noqa: ARG001
    """Map participation-mode wording onto Physical, Virtual or Hybrid.

    Args:
        value (str): Raw extracted text.
        field_key (str): Target field key (unused, kept for the shared signature).

    Returns:
        str | None: Canonical mode label, or None.
    """
    normalized = normalize_text(value)
    for label, synonyms in _MODE_SYNONYMS.items():
        if any(_contains_phrase(normalized, synonym) for synonym in synonyms):
            return label
    return None


def is_level_field(field_key: str) -> bool:
    """Return whether a field key designates a level (national, state...) choice."""
    return "level" in field_key.lower()


def find_dropdown_option(
    value: str,
    options: Sequence[DropdownOption],
    field_key: str = "",
) -> int | str | None:
    """Resolve extracted text against dropdown options.

    Tries an exact match, then substring containment either way, then,
    for level fields, the level synonym table. An option named inside the
    text beats an option whose name contains the text.

    Args:
        value (str): Raw extracted text.
        options (Sequence[DropdownOption]): Candidate options.
        field_key (str): Target field key.

    Returns:
        int | str | None: Matched option id, or None.
    """
    normalized = normalize_text(value)
    if not normalized or not options:
        return None

    candidates = [(normalize_text(option.name), option) for option in options]

    for option_name, option in candidates:
        if option_name == normalized:
            return option.id

    contained = _match_by_containment(normalized, candidates)
    if contained is not None:
        return contained

    if is_level_field(field_key):
        return _match_level(normalized, candidates)
    return None


def _match_by_containment(
    normalized: str,
    candidates: list[tuple[str, DropdownOption]],
) -> int | str | None:
    # Options named inside the text win, longest first; otherwise the
    # shortest option name that contains the whole text.
    inside = [(len(name), option) for name, option in candidates if name and name in normalized]
    if inside:
        return max(inside, key=lambda item: item[0])[1].id
    around = [(len(name), option) for name, option in candidates if normalized in name]
    if around:
        return min(around, key=lambda item: item[0])[1].id
    return None


def _match_level(normalized: str, candidates: list[tuple[str, DropdownOption]]) -> int | str | None:
    for level, synonyms in _LEVEL_SYNONYMS.items():
        if not any(synonym in normalized for synonym in synonyms):
            continue
        # "national" is also a substring of "international"; the shortest name wins.
        matching = [(len(option_name), option) for option_name, option in candidates if level in option_name]
        if matching:
            return min(matching, key=lambda item: item[0])[1].id
    return None


def normalize_typed_value(
    *,
    value: str,
    field_key: str,
    kind: FieldKind,
    options: Sequence[DropdownOption] | None = None,
    min_year: int = DEFAULT_MIN_YEAR,
    max_year: int = DEFAULT_MAX_YEAR,
) -> ProcessedValue:
    """Normalize a raw value according to the field kind.

    Args:
        value (str): Raw extracted value.
        field_key (str): Canonical field key.
        kind (FieldKind): Semantic kind of the field.
        options (Sequence[DropdownOption] | None): Candidate options for select fields.
        min_year (int): Lower date bound (exclusive).
        max_year (int): Upper date bound (exclusive).

    Returns:
        ProcessedValue: Typed value, or the stripped raw string when no normalizer is confident.
    """
    stripped = value.strip()
    normalized: ProcessedValue | None = None

    if kind == FieldKind.DATE:
        normalized = normalize_date(stripped, field_key, min_year=min_year, max_year=max_year)
    elif kind == FieldKind.BOOLEAN:
        normalized = normalize_boolean(stripped, field_key)
    elif kind == FieldKind.NUMBER:
        normalized = normalize_number(stripped, field_key)
    elif kind == FieldKind.MODE:
        normalized = normalize_mode(stripped, field_key)
    elif kind == FieldKind.SELECT:
        normalized = find_dropdown_option(stripped, options or [], field_key)

    return stripped if normalized is None else normalized
