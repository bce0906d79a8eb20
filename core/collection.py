"""
Filtering, sorting and display helpers for the tea grid.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from core.store.schema import Tea

SORT_OPTIONS = {
    "date": "Newest first",
    "name-asc": "Name (A-Z)",
    "name-desc": "Name (Z-A)",
    "type": "Type",
    "caffeine-asc": "Caffeine (low to high)",
    "caffeine-desc": "Caffeine (high to low)",
    "steeps-asc": "Steeps (fewest first)",
    "steeps-desc": "Steeps (most first)",
}
DEFAULT_SORT = "date"

_CAFFEINE_RANK = {"Low": 1, "Medium": 2, "High": 3}


def caffeine_rank(level: str) -> int:
    return _CAFFEINE_RANK.get(level, 0)


def _id_value(tea: Tea) -> int:
    try:
        return int(tea.id)
    except ValueError:
        return 0


def unique_types(teas: Iterable[Tea]) -> List[str]:
    """Types present in the collection, sorted; drives the type filter chips."""
    return sorted({t.type for t in teas})


def filter_teas(
    teas: Iterable[Tea],
    search: str = "",
    tea_type: Optional[str] = None,
    caffeine_level: Optional[str] = None,
) -> List[Tea]:
    """
    Search matches name or type (case-insensitive substring).
    Type and caffeine filters are exact and independent of each other.
    """
    needle = (search or "").lower()
    out = []
    for tea in teas:
        if needle and needle not in tea.name.lower() and needle not in tea.type.lower():
            continue
        if tea_type and tea.type != tea_type:
            continue
        if caffeine_level and tea.caffeine_level != caffeine_level:
            continue
        out.append(tea)
    return out


def sort_teas(teas: Iterable[Tea], sort_by: str = DEFAULT_SORT) -> List[Tea]:
    teas = list(teas)
    if sort_by == "name-asc":
        return sorted(teas, key=lambda t: t.name.lower())
    if sort_by == "name-desc":
        return sorted(teas, key=lambda t: t.name.lower(), reverse=True)
    if sort_by == "type":
        return sorted(teas, key=lambda t: t.type)
    if sort_by == "caffeine-asc":
        return sorted(teas, key=lambda t: caffeine_rank(t.caffeine_level))
    if sort_by == "caffeine-desc":
        return sorted(teas, key=lambda t: caffeine_rank(t.caffeine_level), reverse=True)
    if sort_by == "steeps-asc":
        return sorted(teas, key=lambda t: len(t.steep_times))
    if sort_by == "steeps-desc":
        return sorted(teas, key=lambda t: len(t.steep_times), reverse=True)
    # "date" and anything unknown: newest id first
    return sorted(teas, key=_id_value, reverse=True)


def format_last_consumed_date(timestamp_ms: Optional[float], now: Optional[datetime] = None) -> str:
    """Human label for lastConsumedDate: Never / Today / Yesterday / N days ago / date."""
    if timestamp_ms is None:
        return "Never"
    now = now or datetime.now()
    when = datetime.fromtimestamp(timestamp_ms / 1000)
    days = (now.date() - when.date()).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return f"{when.strftime('%b')} {when.day}, {when.year}"


__all__ = [
    "SORT_OPTIONS",
    "DEFAULT_SORT",
    "caffeine_rank",
    "unique_types",
    "filter_teas",
    "sort_teas",
    "format_last_consumed_date",
]
