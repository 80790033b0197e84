"""Semantic kind of canonical form fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docautofill.typing.enums import FieldKind, FormType

if TYPE_CHECKING:
    from collections.abc import Mapping

_B = FieldKind.BOOLEAN
_D = FieldKind.DATE
_N = FieldKind.NUMBER
_M = FieldKind.MODE
_T = FieldKind.TEXT

FIELD_KIND_HINTS: dict[str, dict[str, FieldKind]] = {
    FormType.PAPERS: {"mode": _M, "date": _D},
    FormType.JOURNAL_ARTICLES: {
        "author_num": _N,
        "volume_num": _T,
        "page_num": _T,
        "month_year": _D,
        "peer_reviewed": _B,
        "h_index": _N,
        "impact_factor": _N,
        "in_scopus": _B,
        "in_ugc": _B,
        "in_clarivate": _B,
        "in_oldUGCList": _B,
        "paid": _B,
    },
    FormType.BOOKS: {"submit_date": _D, "charges_paid": _B, "edited": _B, "chap_count": _N},
    FormType.RESEARCH: {
        "grant_sanctioned": _N,
        "grant_received": _N,
        "duration": _N,
        "start_date": _D,
        "seed_grant": _B,
        "seed_grant_year": _T,
    },
    FormType.PATENTS: {"Tech_Licence": _B, "Earnings_Generate": _N, "date": _D},
    FormType.POLICY: {"date": _D},
    FormType.ECONTENT: {"publishingDate": _D},
    FormType.CONSULTANCY: {"startDate": _D, "duration": _N, "amount": _N},
    FormType.COLLABORATIONS: {
        "collabRank": _N,
        "startingDate": _D,
        "duration": _N,
        "noOfBeneficiary": _N,
        "mouSigned": _B,
        "signingDate": _D,
    },
    FormType.VISITS: {"durationOfVisit": _N, "date": _D},
    FormType.FINANCIAL: {"grantReceived": _N, "date": _D},
    FormType.JRF_SRF: {"duration": _N, "monthlyStipend": _N, "date": _D},
    FormType.PHD: {"dateOfRegistration": _D, "yearOfCompletion": _T},
    FormType.COPYRIGHTS: {"publicationDate": _D},
    FormType.REFRESHER: {"start_date": _D, "end_date": _D},
    FormType.ACADEMIC_PROGRAMS: {"date": _D},
    FormType.PERFORMANCE: {"date": _D},
    FormType.AWARDS: {"date_of_award": _D},
    FormType.EXTENSION: {"date": _D},
    FormType.TALKS: {"date": _D},
    FormType.ARTICLES: {
        "peer_reviewed": _B,
        "h_index": _N,
        "impact_factor": _N,
        "in_scopus": _B,
        "in_ugc": _B,
        "in_clarivate": _B,
        "in_old_ugc_list": _B,
        "price": _N,
    },
    FormType.ACADEMIC_BOOKS: {"publication_date": _D, "ebook": _B, "price": _N},
    FormType.MAGAZINES: {
        "mode": _M,
        "publication_date": _D,
        "has_attachment": _B,
        "issues_per_year": _N,
        "price": _N,
    },
    FormType.TECHNICAL: {"publication_date": _D, "issues_per_year": _N, "price": _N},
}

_NUMERIC_KEYS = frozenset({"amount", "price", "duration"})
_NUMERIC_SUFFIXES = ("_num", "_count")
_BOOLEAN_PREFIXES = ("in_", "is_", "has_")


def infer_field_kind(
    form_type: str,
    field_key: str,
    *,
    overrides: Mapping[str, FieldKind] | None = None,
    has_options: bool = False,
) -> FieldKind:
    """Decide which normalizer a canonical field goes through.

    Args:
        form_type (str): Form type, possibly empty.
        field_key (str): Canonical field key.
        overrides (Mapping[str, FieldKind] | None): Kinds declared by the form.
        has_options (bool): Whether dropdown options were supplied for the key.

    Returns:
        FieldKind: Field kind.
    """
    if overrides and field_key in overrides:
        return overrides[field_key]
    if has_options:
        return FieldKind.SELECT

    hinted = FIELD_KIND_HINTS.get(form_type, {}).get(field_key)
    if hinted is not None:
        return hinted

    key = field_key.lower()
    if "date" in key:
        return FieldKind.DATE
    if "mode" in key:
        return FieldKind.MODE
    if key.startswith(_BOOLEAN_PREFIXES):
        return FieldKind.BOOLEAN
    if key in _NUMERIC_KEYS or key.endswith(_NUMERIC_SUFFIXES):
        return FieldKind.NUMBER
    return FieldKind.TEXT
