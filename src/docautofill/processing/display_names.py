"""User-facing names of backend classification strings."""

from __future__ import annotations

CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "Books/Papers": "Publications",
    "Research & Consultancy": "Research & Academic Contributions",
    "Academic Programs": "Events & Activities",
    "Awards/Performance": "Awards & Recognition",
    "Talks": "Events & Activities",
    "Academic Recommendation": "Academic Recommendations",
}

SUB_CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "Published Articles/Papers in Journals/Edited Volumes": "Published Articles/Journals",
    "Books/Books Chapter(s) Published": "Books/Book Chapters",
    "Papers Presented": "Papers Presented",
    "Research Projects": "Research Projects",
    "Patents": "Patents",
    "Policy Document Developed": "Policy Documents",
    "E Content": "E-Content",
    "Details of Consultancy Undertaken": "Consultancy",
    "Collaborations/MOUs/Linkages Signed": "Collaborations / MoUs",
    "Academic/Research Visit": "Academic Visits",
    "Financial Support/Aid Received For Academic/Research Activities": "Financial Support",
    "Details Of JRF/SRF Working With You": "JRF/SRF",
    "PhD Guidance Details": "PhD Guidance",
    "Copyrights": "Copyrights",
    "Refresher/Orientantion Course": "Refresher/Orientation",
    "Contribution in Organising Academic Programs": "Academic Programs",
    "Participation in Academic Bodies of other Universities": "Academic Bodies",
    "Participation in Committees of University": "University Committees",
    "Talks of Academic/Research Nature": "Academic Talks",
    "Performance by Individual/Group": "Performance",
    "Awards/Fellowship/Recognition": "Awards Recognition",
    "Extension": "Extension Activities",
    "Articles/Journals/Edited Volumes": "Articles/Journals",
    "Books": "Books",
    "Magazines": "Magazines",
    "Technical Report and Other(s)": "Technical Reports",
}


def category_display_name(category: str) -> str:
    """Return the display name of a category, or the category itself."""
    return CATEGORY_DISPLAY_NAMES.get(category, category)


def sub_category_display_name(sub_category: str) -> str:
    """Return the display name of a subcategory, or the subcategory itself."""
    return SUB_CATEGORY_DISPLAY_NAMES.get(sub_category, sub_category)
