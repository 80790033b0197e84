"""Mapping of extraction-service labels onto canonical form field keys."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from docautofill.typing.enums import FormType

if TYPE_CHECKING:
    from collections.abc import Mapping

CATEGORY_FORM_TYPES: dict[str, dict[str, FormType]] = {
    "Books/Papers": {
        "Published Articles/Papers in Journals/Edited Volumes": FormType.JOURNAL_ARTICLES,
        "Books/Books Chapter(s) Published": FormType.BOOKS,
        "Papers Presented": FormType.PAPERS,
    },
    "Research & Consultancy": {
        "Research Projects": FormType.RESEARCH,
        "Patents": FormType.PATENTS,
        "Policy Document Developed": FormType.POLICY,
        "E Content": FormType.ECONTENT,
        "Details of Consultancy Undertaken": FormType.CONSULTANCY,
        "Collaborations/MOUs/Linkages Signed": FormType.COLLABORATIONS,
        "Academic/Research Visit": FormType.VISITS,
        "Financial Support/Aid Received For Academic/Research Activities": FormType.FINANCIAL,
        "Details Of JRF/SRF Working With You": FormType.JRF_SRF,
        "PhD Guidance Details": FormType.PHD,
        "Copyrights": FormType.COPYRIGHTS,
    },
    "Academic Programs": {
        "Refresher/Orientantion Course": FormType.REFRESHER,
        "Contribution in Organising Academic Programs": FormType.ACADEMIC_PROGRAMS,
        "Participation in Academic Bodies of other Universities": FormType.ACADEMIC_BODIES,
        "Participation in Committees of University": FormType.COMMITTEES,
    },
    "Awards/Performance": {
        "Performance by Individual/Group": FormType.PERFORMANCE,
        "Awards/Fellowship/Recognition": FormType.AWARDS,
        "Extension": FormType.EXTENSION,
    },
    "Talks": {
        "Talks of Academic/Research Nature": FormType.TALKS,
    },
    "Academic Recommendation": {
        "Articles/Journals/Edited Volumes": FormType.ARTICLES,
        "Books": FormType.ACADEMIC_BOOKS,
        "Magazines": FormType.MAGAZINES,
        "Technical Report and Other(s)": FormType.TECHNICAL,
    },
}

# Labels are matched exactly, then after `normalize_label`, so spelling
# variants such as "Start_Date" or "start date" need no entry of their own.
# Extra entries below cover backend column names that differ from the labels.
FIELD_NAME_MAPPINGS: dict[str, dict[str, str]] = {
    FormType.PAPERS: {
        "Presentation Level": "level",
        "Mode of Participation": "mode",
        "Theme Of Conference/Seminar/Symposia": "theme",
        "Organizing Body": "organising_body",
        "Organising Body": "organising_body",
        "Place": "place",
        "Date of Presentation/Seminar": "date",
        "Date": "date",
        "Title of Paper": "title_of_paper",
        "Title": "title_of_paper",
        "Author(s)": "authors",
        "Authors": "authors",
    },
    FormType.JOURNAL_ARTICLES: {
        "Author(s)": "authors",
        "No. of Authors": "author_num",
        "Author Type": "author_type",
        "Title": "title",
        "Type": "type",
        "ISSN (Without - )": "issn",
        "ISBN (Without - )": "isbn",
        "Journal/Book Name": "journal_name",
        "Volume No.": "volume_num",
        "Page No. (Range)": "page_num",
        "Date": "month_year",
        "Level": "level",
        "Peer Reviewed?": "peer_reviewed",
        "H Index": "h_index",
        "Impact Factor": "impact_factor",
        "DOI": "DOI",
        "In Scopus?": "in_scopus",
        "In UGC CARE?": "in_ugc",
        "In CLARIVATE?": "in_clarivate",
        "In Old UGC List?": "in_oldUGCList",
        "Charges Paid?": "paid",
    },
    FormType.BOOKS: {
        "Authors": "authors",
        "Title": "title",
        "ISBN (Without - )": "isbn",
        "Publisher Name": "publisher_name",
        "Publishing Date": "submit_date",
        "Publishing Place": "publishing_place",
        "Charges Paid": "charges_paid",
        "Edited": "edited",
        "Chapter Count": "chap_count",
        "Publishing Level": "publishing_level",
        "Book Type": "book_type",
        "Author Type": "author_type",
    },
    FormType.RESEARCH: {
        "Title": "title",
        "Funding Agency": "funding_agency",
        "Total Grant Sanctioned": "grant_sanctioned",
        "Total Grant Received": "grant_received",
        "Project Nature Level": "proj_level",
        "Project Nature": "proj_nature",
        "Duration": "duration",
        "Status": "status",
        "Start Date": "start_date",
        "Seed Grant": "seed_grant",
        "Seed Grant Year": "seed_grant_year",
    },
    FormType.PATENTS: {
        "Title": "title",
        "Level": "level",
        "Status": "status",
        "Date": "date",
        "Transfer of Technology with Licence": "Tech_Licence",
        "transfer_of_technology": "Tech_Licence",
        "Tech_Licence": "Tech_Licence",
        "Earning Generated (Rupees)": "Earnings_Generate",
        "earning_generated": "Earnings_Generate",
        "Earnings_Generate": "Earnings_Generate",
        "Patent Application/Publication/Grant No.": "PatentApplicationNo",
        "PatentApplicationNo": "PatentApplicationNo",
    },
    FormType.POLICY: {
        "Title": "title",
        "Level": "level",
        "Organisation": "organisation",
        "Date": "date",
    },
    FormType.ECONTENT: {
        "Title": "title",
        "Type of E-Content Platform": "type",
        "Type of E Content": "type",
        "Brief Details": "briefDetails",
        "briefDetails": "briefDetails",
        "Quadrant": "quadrant",
        "Publishing Date": "publishingDate",
        "publishingDate": "publishingDate",
        "Publishing Authorities": "publishingAuthorities",
        "publishingAuthorities": "publishingAuthorities",
        "Link": "link",
    },
    FormType.CONSULTANCY: {
        "Title": "title",
        "name": "title",
        "Collaborating Institute / Industry": "collaboratingInstitute",
        "collaborating_inst": "collaboratingInstitute",
        "collaboratingInstitute": "collaboratingInstitute",
        "Address": "address",
        "Start Date": "startDate",
        "startDate": "startDate",
        "Duration(in Months)": "duration",
        "Amount(Rs.)": "amount",
        "Details / Outcome": "detailsOutcome",
        "details": "detailsOutcome",
        "detailsOutcome": "detailsOutcome",
    },
    FormType.COLLABORATIONS: {
        "Category": "category",
        "Collaborating Institute": "collaboratingInstitute",
        "collaborating_inst": "collaboratingInstitute",
        "collaboratingInstitute": "collaboratingInstitute",
        "Name of Collaborator(At other institute)": "collabName",
        "Name of Collaborator": "collabName",
        "collab_name": "collabName",
        "collabName": "collabName",
        "QS/THE World University Ranking of Institute": "collabRank",
        "qs_ranking": "collabRank",
        "collabRank": "collabRank",
        "Address": "address",
        "Details": "details",
        "Collaboration Outcome": "collabOutcome",
        "outcome": "collabOutcome",
        "collabOutcome": "collabOutcome",
        "Status": "status",
        "Starting Date": "startingDate",
        "startingDate": "startingDate",
        "Duration(months)": "duration",
        "Level": "level",
        "No. of Beneficiary": "noOfBeneficiary",
        "beneficiary_count": "noOfBeneficiary",
        "beneficiary_num": "noOfBeneficiary",
        "noOfBeneficiary": "noOfBeneficiary",
        "MOU Signed?": "mouSigned",
        "mouSigned": "mouSigned",
        "Signing Date": "signingDate",
        "signingDate": "signingDate",
    },
    FormType.VISITS: {
        "Institute/Industry Visited": "instituteVisited",
        "institute": "instituteVisited",
        "instituteVisited": "instituteVisited",
        "Duration of Visit(days)": "durationOfVisit",
        "duration": "durationOfVisit",
        "durationOfVisit": "durationOfVisit",
        "Role": "role",
        "Sponsored By": "sponsoredBy",
        "sponsoredBy": "sponsoredBy",
        "Remarks": "remarks",
        "Date": "date",
    },
    FormType.FINANCIAL: {
        "Name Of Support": "nameOfSupport",
        "title": "nameOfSupport",
        "nameOfSupport": "nameOfSupport",
        "Type": "type",
        "Supporting Agency": "supportingAgency",
        "agency": "supportingAgency",
        "supportingAgency": "supportingAgency",
        "Grant Received": "grantReceived",
        "amount": "grantReceived",
        "grantReceived": "grantReceived",
        "Details Of Event": "detailsOfEvent",
        "event_details": "detailsOfEvent",
        "detailsOfEvent": "detailsOfEvent",
        "Purpose Of Grant": "purposeOfGrant",
        "purpose": "purposeOfGrant",
        "purposeOfGrant": "purposeOfGrant",
        "Date": "date",
    },
    FormType.JRF_SRF: {
        "Name Of Fellow": "nameOfFellow",
        "name": "nameOfFellow",
        "Type": "type",
        "Project Title": "projectTitle",
        "Duration [in months]": "duration",
        "Monthly Stipend": "monthlyStipend",
        "stipend": "monthlyStipend",
        "Date": "date",
    },
    FormType.PHD: {
        "Reg No": "regNo",
        "regno": "regNo",
        "Name of Student": "nameOfStudent",
        "name": "nameOfStudent",
        "nameOfStudent": "nameOfStudent",
        "Date of Registration": "dateOfRegistration",
        "start_date": "dateOfRegistration",
        "dateOfRegistration": "dateOfRegistration",
        "Topic": "topic",
        "Status": "status",
        "Year of Completion": "yearOfCompletion",
        "completion_year": "yearOfCompletion",
        "yearOfCompletion": "yearOfCompletion",
    },
    FormType.COPYRIGHTS: {
        "Title": "title",
        "Reference No.": "referenceNo",
        "Publication Date": "publicationDate",
        "Link": "link",
    },
    FormType.REFRESHER: {
        "Name": "name",
        "Course Type": "course_type",
        "refresher_type": "course_type",
        "Start Date": "start_date",
        "startdate": "start_date",
        "End Date": "end_date",
        "enddate": "end_date",
        "Orgnizing University": "organizing_university",
        "Organizing University": "organizing_university",
        "university": "organizing_university",
        "Orgnizing Institute": "organizing_institute",
        "Organizing Institute": "organizing_institute",
        "institute": "organizing_institute",
        "Orgnizing Department": "organizing_department",
        "Organizing Department": "organizing_department",
        "department": "organizing_department",
        "Centre": "centre",
    },
    FormType.ACADEMIC_PROGRAMS: {
        "Name": "name",
        "Programme": "programme",
        "Place": "place",
        "Date": "date",
        "Year": "year",
        "Participated As": "participated_as",
    },
    FormType.ACADEMIC_BODIES: {
        "Course Title": "name",
        "Academic Body": "acad_body",
        "Place": "place",
        "Participated As": "participated_as",
        "Year": "year_name",
    },
    FormType.COMMITTEES: {
        "Name": "name",
        "Committee Name": "committee_name",
        "Level": "level",
        "Participated As": "participated_as",
        "Year": "year",
    },
    FormType.PERFORMANCE: {
        "Title of Performance": "name",
        "Place": "place",
        "Performance Date": "date",
        "Nature of Performance": "perf_nature",
    },
    FormType.AWARDS: {
        "Name of Award / Fellowship": "name",
        "Details": "details",
        "Name of Awarding Agency": "organization",
        "Adress of Awarding Agency": "address",
        "Address of Awarding Agency": "address",
        "Date of Award": "date_of_award",
        "Level": "level",
    },
    FormType.EXTENSION: {
        "Name of Activity": "name_of_activity",
        "Nature of Activity": "names",
        "nature": "names",
        "names": "names",
        "Level": "level",
        "Sponsered By": "sponsered",
        "Sponsored By": "sponsered",
        "sponsered": "sponsered",
        "Place": "place",
        "Date": "date",
    },
    FormType.TALKS: {
        "Name": "name",
        "Programme": "programme",
        "Place": "place",
        "Talk Date": "date",
        "Date": "date",
        "Title of Event / Talk": "title",
        "Title": "title",
        "Participated As": "participated_as",
    },
    FormType.ARTICLES: {
        "Journal Name": "journal_name",
        "ISSN (Without - )": "issn",
        "E-ISSN (Without - )": "e_issn",
        "Volume No.": "volume",
        "Publisher  s Name": "publisher",
        "Type": "type",
        "Level": "level",
        "Peer Reviewed?": "peer_reviewed",
        "H Index": "h_index",
        "Impact Factor": "impact_factor",
        "DOI": "doi",
        "In Scopus?": "in_scopus",
        "In UGC CARE?": "in_ugc",
        "In CLARIVATE?": "in_clarivate",
        "In Old UGC List?": "in_old_ugc_list",
        "Approx. Price": "price",
        "Currency": "currency",
    },
    FormType.ACADEMIC_BOOKS: {
        "Title": "title",
        "Author(s)": "authors",
        "ISBN (Without - )": "isbn",
        "Publisher Name": "publisher",
        "Publishing Level": "publishing_level",
        "Book Type": "book_type",
        "Edition": "edition",
        "Volume No.": "volume",
        "Publication Date": "publication_date",
        "EBook": "ebook",
        "Digital Media(If any provided like Pendrive,CD/DVD)": "digital_media",
        "Approx. Price": "price",
        "Currency": "currency",
    },
    FormType.MAGAZINES: {
        "Title": "title",
        "Mode": "mode",
        "Publishing Agency": "publishing_agency",
        "Volume No.": "volume",
        "Publication Date": "publication_date",
        "Is Additional Attachment(USB/CD/DVD)?": "has_attachment",
        "AdditionalAttachment": "additional_attachment",
        "No. of Issues per Year": "issues_per_year",
        "Approx. Price": "price",
        "Currency": "currency",
    },
    FormType.TECHNICAL: {
        "Title": "title",
        "Subject": "subject",
        "Publisher  s Name": "publisher",
        "Publication Date": "publication_date",
        "No. of Issues per Year": "issues_per_year",
        "Approx. Price": "price",
        "Currency": "currency",
    },
}


def normalize_label(label: str) -> str:
    """Normalize a label for comparison.

    Underscores become spaces before punctuation is dropped, so
    `Start_Date` and `Start Date` compare equal.

    Args:
        label (str): Raw label.

    Returns:
        str: Lowercase words separated by single spaces.
    """
    spaced = label.lower().replace("_", " ")
    cleaned = re.sub(r"[^a-z0-9\s]", "", spaced)
    return " ".join(cleaned.split())


def fallback_key(label: str) -> str:
    """Derive a snake_case key from a raw label.

    Args:
        label (str): Raw label.

    Returns:
        str: Lowercase key, or the lowercased label when it has no alphanumerics.
    """
    key = re.sub(r"[^a-zA-Z0-9]+", "_", label.strip().lower()).strip("_")
    return key or label.strip().lower()


def resolve_form_type(category: str, sub_category: str) -> str:
    """Return the form type of a classification.

    Both parts are compared exactly first, then normalized.

    Args:
        category (str): Classification category.
        sub_category (str): Classification subcategory.

    Returns:
        str: Form type, or an empty string for unknown combinations.
    """
    sub_map = CATEGORY_FORM_TYPES.get(category)
    if sub_map is None:
        wanted = normalize_label(category)
        sub_map = next(
            (mapping for name, mapping in CATEGORY_FORM_TYPES.items() if normalize_label(name) == wanted),
            None,
        )
    if sub_map is None:
        return ""

    form_type = sub_map.get(sub_category)
    if form_type is not None:
        return form_type.value

    wanted_sub = normalize_label(sub_category)
    for name, candidate in sub_map.items():
        if normalize_label(name) == wanted_sub:
            return candidate.value
    return ""


def lookup_static_mapping(form_type: str, label: str) -> str | None:
    """Look a label up in the static table of a form type.

    Tries the exact label, the normalized label, then whole-word containment
    either way with the longest table label winning.

    Args:
        form_type (str): Form type.
        label (str): Raw extracted label.

    Returns:
        str | None: Canonical key, or None when the table has no match.
    """
    mappings = FIELD_NAME_MAPPINGS.get(form_type)
    if not mappings:
        return None

    direct = mappings.get(label)
    if direct is not None:
        return direct

    normalized = normalize_label(label)
    if not normalized:
        return None
    normalized_table = [(normalize_label(key), value) for key, value in mappings.items()]
    for key, value in normalized_table:
        if key == normalized:
            return value

    best: str | None = None
    best_length = 0
    padded = f" {normalized} "
    for key, value in normalized_table:
        if not key:
            continue
        if f" {key} " in padded or padded in f" {key} ":
            if len(key) > best_length:
                best, best_length = value, len(key)
    return best


def map_field_name(
    form_type: str,
    label: str,
    overrides: Mapping[str, str | None] | None = None,
) -> str | None:
    """Return the canonical form-field key for an extracted label.

    Lookup order is the caller's override mapping, the form type's static
    table, then the snake_case fallback of the label itself. An override
    set to None suppresses the label.

    Args:
        form_type (str): Form type, possibly empty.
        label (str): Raw extracted label.
        overrides (Mapping[str, str | None] | None): Per-form overrides.

    Returns:
        str | None: Canonical key, or None only when suppressed by an override.
    """
    if overrides and label in overrides:
        return overrides[label]

    if form_type:
        mapped = lookup_static_mapping(form_type, label)
        if mapped is not None:
            return mapped

    return fallback_key(label)
