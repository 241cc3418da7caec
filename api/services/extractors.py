"""Field extractor functions for distribution breakdowns.

These functions classify a team member for use with compute_breakdown. Each
extractor handles None/empty values consistently.
"""

from __future__ import annotations

from typing import Any

# Substrings identifying the host institution in the free-text college field
INTERNAL_COLLEGE_MARKERS = ("hindustan", "hits")

YEAR_BUCKETS = ("1", "2", "3", "4", "Other")

INTERNAL = "Internal"
EXTERNAL = "External"


def is_internal(member: Any) -> bool:
    """True if the member's college names the host institution."""
    college = (getattr(member, "college", None) or "").lower()
    return any(marker in college for marker in INTERNAL_COLLEGE_MARKERS)


def extract_affiliation(member: Any) -> str:
    """Extract 'Internal' or 'External' from a member's college."""
    return INTERNAL if is_internal(member) else EXTERNAL


def extract_year(member: Any) -> str:
    """Extract year of study, returning 'Other' for anything outside 1-4."""
    year = str(getattr(member, "year", None) or "").strip()
    return year if year in YEAR_BUCKETS[:4] else "Other"


def extract_member_id(member: Any) -> str | None:
    """Extract the member id, returning None for missing/empty ids."""
    member_id = getattr(member, "id", None)
    return str(member_id) if member_id else None
