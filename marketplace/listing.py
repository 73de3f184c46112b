from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from google.cloud.firestore import Client

from config.settings import settings
from repos.ad_repo import AdRepository
from repos.application_repo import ApplicationRepository
from repos.pharmacy_repo import PharmacyRepository
from repos.substitute_repo import SubstituteRepository
from repos.user_repo import UserRepository
from storage.firestore_client import get_firestore_client

log = logging.getLogger("patika.listing")


def _start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def _ad_start(ad: Dict[str, Any]) -> Optional[datetime]:
    v = ad.get("dateFrom")
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
    return None


class ListingService:
    """Reads that join ads, pharmacies, substitutes and applications with point lookups."""

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()
        self.ads = AdRepository(self.db)
        self.applications = ApplicationRepository(self.db)
        self.pharmacies = PharmacyRepository(self.db)
        self.substitutes = SubstituteRepository(self.db)
        self.users = UserRepository(self.db)

    # -------- lookups that never fail a listing --------
    def _pharmacy_or_none(self, pharmacy_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.pharmacies.get(pharmacy_id)
        except Exception as e:
            log.error(
                "pharmacy_fetch_failed",
                extra={"extra": {"pharmacy_id": pharmacy_id, "error_type": type(e).__name__, "message": str(e)}},
            )
            return None

    def _substitute_or_none(self, substitute_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.substitutes.get(substitute_id)
        except Exception as e:
            log.error(
                "substitute_fetch_failed",
                extra={"extra": {"substitute_id": substitute_id, "error_type": type(e).__name__, "message": str(e)}},
            )
            return None

    def _with_pharmacy(self, ads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [{**ad, "pharmacy": self._pharmacy_or_none(str(ad.get("pharmacyId") or ""))} for ad in ads]

    # -------- ads --------
    def get_latest_ads(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._with_pharmacy(self.ads.list_open(limit=count or settings.LATEST_ADS_COUNT))

    def get_open_ads_with_pharmacy(self) -> List[Dict[str, Any]]:
        return self._with_pharmacy(self.ads.list_open())

    def get_ads_by_position_and_region(
        self,
        position: str,
        region: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        start = _start_of_day(date_from or datetime.now(timezone.utc).date())
        # date_to is inclusive: anything starting later than that day is skipped
        end = _start_of_day(date_to) if date_to else None

        out: List[Dict[str, Any]] = []
        for ad in self.ads.search_open(position, region, start):
            ad_start = _ad_start(ad)
            if end is not None and ad_start is not None and ad_start > end:
                continue
            pharmacy = self._pharmacy_or_none(str(ad.get("pharmacyId") or ""))
            if pharmacy is None:
                continue
            out.append({**ad, "pharmacy": pharmacy})
        return out

    def get_ad_by_id(self, ad_id: str) -> Optional[Dict[str, Any]]:
        ad = self.ads.get(ad_id)
        if ad is None:
            return None
        pharmacy = self._pharmacy_or_none(str(ad.get("pharmacyId") or ""))
        if pharmacy is not None and not pharmacy.get("email") and pharmacy.get("userId"):
            try:
                email = self.users.get_email(str(pharmacy["userId"]))
            except Exception as e:
                log.error(
                    "owner_email_fetch_failed",
                    extra={"extra": {"user_id": pharmacy["userId"], "error_type": type(e).__name__, "message": str(e)}},
                )
                email = ""
            if email:
                pharmacy["email"] = email
        return {**ad, "pharmacy": pharmacy}

    # -------- applications --------
    def get_ad_applications(self, ad_id: str) -> List[Dict[str, Any]]:
        return [
            {**app, "substitute": self._substitute_or_none(str(app.get("substituteId") or ""))}
            for app in self.applications.list_by_ad(ad_id)
        ]

    def get_pharmacy_applications(self, user_id: str, ads: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        if ads is None:
            ads = self.ads.list_by_user(user_id)
        by_id = {ad["id"]: ad for ad in ads if ad.get("id")}
        if not by_id:
            return []
        return [
            {
                **app,
                "ad": by_id.get(app.get("adId")),
                "substitute": self._substitute_or_none(str(app.get("substituteId") or "")),
            }
            for app in self.applications.list_by_ads(list(by_id))
        ]

    def get_substitute_applications(self, substitute_id: str) -> List[Dict[str, Any]]:
        out = []
        for app in self.applications.list_by_substitute(substitute_id):
            ad: Optional[Dict[str, Any]] = None
            pharmacy: Optional[Dict[str, Any]] = None
            try:
                ad = self.ads.get(str(app.get("adId") or ""))
                if ad is not None:
                    pharmacy = self.pharmacies.get(str(ad.get("pharmacyId") or ""))
            except Exception as e:
                log.error(
                    "ad_fetch_failed",
                    extra={"extra": {"ad_id": app.get("adId"), "error_type": type(e).__name__, "message": str(e)}},
                )
            out.append({**app, "ad": ad, "pharmacy": pharmacy})
        return out
