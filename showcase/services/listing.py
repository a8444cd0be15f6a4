from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WorkFilter:
    category: Optional[str] = None
    search: Optional[str] = None
    ascending: bool = False


def build_filter(
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> WorkFilter:
    """Translate gallery query parameters into a WorkFilter.

    ``category=all`` (or nothing) drops the category constraint, a blank
    search drops the text constraint and only ``sort=oldest`` sorts ascending.
    """
    category = (category or "").strip()
    search = (search or "").strip()
    return WorkFilter(
        category=category if category and category != "all" else None,
        search=search or None,
        ascending=sort == "oldest",
    )
