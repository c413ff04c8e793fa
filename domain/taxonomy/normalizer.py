"""Label normalization for callers that want tolerant taxonomy lookups."""

import re


def normalize_label(raw: object) -> str:
    """
    Normalize a research-field label before an exact lookup.

    Collapses runs of whitespace and tightens spaces around slashes. Case is
    preserved because taxonomy lookups are case-sensitive.

    Examples:
        >>> normalize_label("  Computer   Sciences ")
        'Computer Sciences'
        >>> normalize_label("Databases / Information Systems")
        'Databases/Information Systems'

    Args:
        raw: Raw label value (can be None, str, or other types)

    Returns:
        Normalized label, or empty string if invalid
    """
    if raw is None:
        return ""
    s = str(raw).strip()
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return re.sub(r"\s*/\s*", "/", s)
