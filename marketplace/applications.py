from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set

from google.cloud.firestore import Client

from marketplace.ad_wizard import AdForm, to_ad_payload, validate_all
from marketplace.errors import (
    AdClosedError,
    AlreadyAppliedError,
    ForbiddenError,
    NotFoundError,
    ValidationFailed,
)
from models.schema import AD_CLOSED, AD_OPEN, APP_ACCEPTED, APP_REJECTED
from repos.ad_repo import AdRepository
from repos.application_repo import ApplicationRepository
from repos.pharmacy_repo import PharmacyRepository
from storage.firestore_client import get_firestore_client

log = logging.getLogger("patika.applications")

REVIEW_STATUSES = (APP_ACCEPTED, APP_REJECTED)


class MarketplaceService:
    """Ad lifecycle and application writes, with ownership checks on the pharmacy side."""

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()
        self.ads = AdRepository(self.db)
        self.applications = ApplicationRepository(self.db)
        self.pharmacies = PharmacyRepository(self.db)

    # -------- ownership --------
    def owned_pharmacy_ids(self, user_id: str) -> Set[str]:
        return {p["id"] for p in self.pharmacies.list_by_user(user_id)}

    def is_owner(self, user_id: str, ad: Dict[str, Any]) -> bool:
        return bool(user_id) and ad.get("pharmacyId") in self.owned_pharmacy_ids(user_id)

    def require_owned_ad(self, user_id: str, ad_id: str) -> Dict[str, Any]:
        ad = self.ads.get(ad_id)
        if ad is None:
            raise NotFoundError("A hirdetés nem található.", detail="ad_not_found")
        if not self.is_owner(user_id, ad):
            raise ForbiddenError(detail="not_ad_owner")
        return ad

    # -------- ads --------
    def create_ad(self, user_id: str, form: AdForm) -> str:
        missing = validate_all(form)
        if missing:
            raise ValidationFailed(fields=[f for fields in missing.values() for f in fields])
        if form.selected_pharmacy_id not in self.owned_pharmacy_ids(user_id):
            raise ForbiddenError("Válassz egy saját patikát.", detail="pharmacy_not_owned")
        payload = {**to_ad_payload(form), "userId": user_id, "pharmacyId": form.selected_pharmacy_id}
        ad_id = self.ads.create(payload)
        log.info("ad_created", extra={"extra": {"ad_id": ad_id, "user_id": user_id}})
        return ad_id

    def update_ad(self, user_id: str, ad_id: str, form: AdForm) -> None:
        self.require_owned_ad(user_id, ad_id)
        missing = validate_all(form)
        if missing:
            raise ValidationFailed(fields=[f for fields in missing.values() for f in fields])
        self.ads.update(ad_id, to_ad_payload(form))
        log.info("ad_updated", extra={"extra": {"ad_id": ad_id, "user_id": user_id}})

    def close_ad(self, user_id: str, ad_id: str) -> None:
        self.require_owned_ad(user_id, ad_id)
        self.ads.set_status(ad_id, AD_CLOSED)

    def reopen_ad(self, user_id: str, ad_id: str) -> None:
        self.require_owned_ad(user_id, ad_id)
        self.ads.set_status(ad_id, AD_OPEN)

    def delete_ad(self, user_id: str, ad_id: str) -> int:
        self.require_owned_ad(user_id, ad_id)
        removed = self.ads.delete_with_applications(ad_id)
        log.info("ad_deleted", extra={"extra": {"ad_id": ad_id, "applications_removed": removed}})
        return removed

    # -------- applications --------
    def apply_to_ad(self, ad_id: str, substitute_id: str) -> str:
        ad = self.ads.get(ad_id)
        if ad is None:
            raise NotFoundError("A hirdetés nem található.", detail="ad_not_found")
        if ad.get("status") != AD_OPEN:
            raise AdClosedError()
        if self.applications.exists(ad_id, substitute_id):
            raise AlreadyAppliedError()
        app_id = self.applications.create(ad_id, substitute_id)
        log.info("application_created", extra={"extra": {"ad_id": ad_id, "application_id": app_id}})
        return app_id

    def set_application_status(self, user_id: str, application_id: str, status: str) -> Dict[str, Any]:
        if status not in REVIEW_STATUSES:
            raise ValidationFailed("Érvénytelen státusz.", detail="invalid_status")
        app = self.applications.get(application_id)
        if app is None:
            raise NotFoundError("A jelentkezés nem található.", detail="application_not_found")
        self.require_owned_ad(user_id, str(app.get("adId") or ""))
        self.applications.set_status(application_id, status)
        log.info("application_status_set", extra={"extra": {"application_id": application_id, "status": status}})
        return {**app, "status": status}
