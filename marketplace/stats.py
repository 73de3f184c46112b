from __future__ import annotations

from typing import Any, Dict, Iterable, List

from models.schema import AD_CLOSED, AD_OPEN, APP_ACCEPTED, APP_PENDING, APP_REJECTED


def _count(items: Iterable[Dict[str, Any]], status: str) -> int:
    return sum(1 for it in items if it.get("status") == status)


def calculate_pharmacy_stats(ads: List[Dict[str, Any]], applications: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "totalAds": len(ads),
        "activeAds": _count(ads, AD_OPEN),
        "closedAds": _count(ads, AD_CLOSED),
        "totalApplications": len(applications),
        "pendingApplications": _count(applications, APP_PENDING),
        "acceptedApplications": _count(applications, APP_ACCEPTED),
        "rejectedApplications": _count(applications, APP_REJECTED),
    }


def calculate_substitute_stats(applications: List[Dict[str, Any]], available_ads_count: int = 0) -> Dict[str, int]:
    return {
        "totalApplications": len(applications),
        "pendingApplications": _count(applications, APP_PENDING),
        "acceptedApplications": _count(applications, APP_ACCEPTED),
        "rejectedApplications": _count(applications, APP_REJECTED),
        "availableAds": int(available_ads_count or 0),
    }


def ad_application_counts(ad_id: str, applications: List[Dict[str, Any]]) -> Dict[str, int]:
    mine = [a for a in applications if a.get("adId") == ad_id]
    return {
        "total": len(mine),
        "pending": _count(mine, APP_PENDING),
        "accepted": _count(mine, APP_ACCEPTED),
    }
