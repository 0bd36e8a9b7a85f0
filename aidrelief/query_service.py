"""Filtering and sorting of the triage list.

Everything here works on lists already read from the store and returns new
lists; inputs are never reordered or modified.
"""
from typing import Iterable, List, Optional

from aidrelief.schemas import ALL, SORT_FIELDS, AidRequest


def matches(
    item: AidRequest,
    category: str = ALL,
    severity: str = ALL,
    pending_only: bool = False,
) -> bool:
    return (
        (category == ALL or item.category == category)
        and (severity == ALL or item.severity == severity)
        and (not pending_only or item.status == "Pending")
    )


def filter_requests(
    items: Iterable[AidRequest],
    category: str = ALL,
    severity: str = ALL,
    pending_only: bool = False,
) -> List[AidRequest]:
    return [x for x in items if matches(x, category, severity, pending_only)]


def sort_requests(items: Iterable[AidRequest], field: str = "neededBy") -> List[AidRequest]:
    """Ascending sort on the raw text of ``field``.

    Severity sorts by its label, so High < Low < Moderate.
    """
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {field!r}. Use one of: {', '.join(SORT_FIELDS)}.")
    return sorted(items, key=lambda x: getattr(x, field) or "")


def triage_view(
    items: Iterable[AidRequest],
    category: str = ALL,
    severity: str = ALL,
    pending_only: bool = False,
    sort_field: Optional[str] = "neededBy",
) -> List[AidRequest]:
    filtered = filter_requests(items, category, severity, pending_only)
    if not sort_field:
        return filtered
    return sort_requests(filtered, sort_field)


def unique_categories(items: Iterable[AidRequest]) -> List[str]:
    out = [ALL]
    for x in items:
        if x.category is not None and x.category not in out:
            out.append(x.category)
    return out
