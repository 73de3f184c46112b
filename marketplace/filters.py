from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple


def has_salary(ad: Dict[str, Any]) -> bool:
    amount = (ad.get("salary") or {}).get("amount")
    try:
        return bool(amount) and float(amount) > 0
    except (TypeError, ValueError):
        return False


def matches_search(ad: Dict[str, Any], query: str) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    pharmacy = ad.get("pharmacy") or {}
    haystack = (
        str(pharmacy.get("name") or "").lower(),
        str((pharmacy.get("address") or {}).get("city") or "").lower(),
        str(ad.get("description") or "").lower(),
    )
    return any(q in h for h in haystack)


def filter_ads(ads: Iterable[Dict[str, Any]], only_with_salary: bool = False,
               search_query: str = "") -> List[Dict[str, Any]]:
    """Client-side pass over already fetched ads. Order is preserved."""
    result = list(ads)
    if only_with_salary:
        result = [ad for ad in result if has_salary(ad)]
    if (search_query or "").strip():
        result = [ad for ad in result if matches_search(ad, search_query)]
    return result


@dataclass
class BrowseFilters:
    qualification: str = ""
    region: str = ""
    only_with_salary: bool = False
    search_query: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @property
    def filters_selected(self) -> bool:
        return bool(self.qualification and self.region)

    @property
    def active_filters_count(self) -> int:
        return len([v for v in (self.qualification, self.region) if v])


def split_by_status(items: Iterable[Dict[str, Any]], status: str) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """(matching, rest) by the `status` field."""
    matching, rest = [], []
    for it in items:
        (matching if it.get("status") == status else rest).append(it)
    return matching, rest
