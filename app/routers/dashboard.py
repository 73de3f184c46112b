from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from google.cloud.firestore import Client

from app.dependencies import get_db
from config.settings import settings
from marketplace.filters import split_by_status
from marketplace.formatting import with_display
from marketplace.listing import ListingService
from marketplace.stats import ad_application_counts, calculate_pharmacy_stats, calculate_substitute_stats
from models.schema import AD_CLOSED, AD_OPEN, APP_ACCEPTED, APP_PENDING
from repos.ad_repo import AdRepository
from repos.pharmacy_repo import PharmacyRepository
from repos.substitute_repo import SubstituteRepository
from security.firebase_auth import PharmacyAccount, SubstituteAccount

router = APIRouter()


def _pharmacies_or_403(db: Client, user_id: str):
    pharmacies = PharmacyRepository(db).list_by_user(user_id)
    if not pharmacies:
        raise HTTPException(status_code=403, detail="pharmacy_profile_missing")
    return pharmacies


@router.get("/dashboard/pharmacy")
def pharmacy_dashboard(account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    user_id = account["user_id"]
    pharmacies = _pharmacies_or_403(db, user_id)
    names = {p["id"]: p.get("name") or "" for p in pharmacies}

    listing = ListingService(db)
    ads = listing.ads.list_by_user(user_id)
    applications = listing.get_pharmacy_applications(user_id, ads=ads)

    active, closed = split_by_status(ads, AD_OPEN)
    recent = [a for a in applications if a.get("status") == APP_PENDING][: settings.RECENT_APPLICATIONS_LIMIT]

    def _card(ad):
        return {
            **with_display(ad),
            "pharmacy_name": names.get(ad.get("pharmacyId"), ""),
            "applications": ad_application_counts(ad["id"], applications),
        }

    return {
        "ok": True,
        "greeting_name": account["user"].get("name") or account["user"].get("email") or "",
        "stats": calculate_pharmacy_stats(ads, applications),
        "active_ads": [_card(ad) for ad in active],
        "closed_ads": [_card(ad) for ad in closed if ad.get("status") == AD_CLOSED],
        "recent_applications": recent,
        "pharmacies": pharmacies,
    }


@router.get("/dashboard/pharmacy/applications")
def pharmacy_applications(
    ad_id: str = "",
    include_closed: bool = False,
    account: dict = PharmacyAccount,
    db: Client = Depends(get_db),
):
    user_id = account["user_id"]
    _pharmacies_or_403(db, user_id)

    ads_repo = AdRepository(db)
    active_ads = ads_repo.list_by_user_and_status(user_id, AD_OPEN)
    closed_ads = ads_repo.list_by_user_and_status(user_id, AD_CLOSED) if include_closed else []
    all_ads = active_ads + closed_ads

    selected = next((a for a in all_ads if a["id"] == ad_id), None) if ad_id else None
    if ad_id and selected is None:
        raise HTTPException(status_code=404, detail="ad_not_found")
    if selected is None and active_ads:
        selected = active_ads[0]

    applications = ListingService(db).get_ad_applications(selected["id"]) if selected else []
    pending, processed = split_by_status(applications, APP_PENDING)

    return {
        "ok": True,
        "active_ads": [with_display(a) for a in active_ads],
        "closed_ads": [with_display(a) for a in closed_ads],
        "selected_ad": with_display(selected),
        "applications": applications,
        "pending_applications": pending,
        "processed_applications": processed,
    }


@router.get("/dashboard/substitute")
def substitute_dashboard(account: dict = SubstituteAccount, db: Client = Depends(get_db)):
    substitute = SubstituteRepository(db).get(account["user_id"])
    if substitute is None:
        raise HTTPException(status_code=403, detail="substitute_profile_missing")

    listing = ListingService(db)
    applications = listing.get_substitute_applications(substitute["id"])
    available = listing.get_open_ads_with_pharmacy()

    for app in applications:
        app["ad"] = with_display(app.get("ad"))

    return {
        "ok": True,
        "greeting_name": substitute.get("name") or "",
        "substitute": substitute,
        "stats": calculate_substitute_stats(applications, len(available)),
        "applications": applications,
        "pending_applications": [a for a in applications if a.get("status") == APP_PENDING],
        "accepted_applications": [a for a in applications if a.get("status") == APP_ACCEPTED],
        "available_ads": [with_display(ad) for ad in available[: settings.AVAILABLE_ADS_PREVIEW]],
    }
