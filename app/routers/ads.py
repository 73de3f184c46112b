from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from google.cloud.firestore import Client
from pydantic import BaseModel, Field

from app.dependencies import get_db
from marketplace.ad_wizard import LAST_STEP, AdForm, AdWizard
from marketplace.applications import MarketplaceService
from marketplace.errors import NotFoundError, ValidationFailed
from marketplace.filters import BrowseFilters, filter_ads
from marketplace.formatting import with_display
from marketplace.listing import ListingService
from models.schema import APP_PENDING, QUALIFICATIONS, REGIONS, ROLE_SUBSTITUTE
from repos.application_repo import ApplicationRepository
from repos.pharmacy_repo import PharmacyRepository
from repos.substitute_repo import SubstituteRepository
from security.firebase_auth import PharmacyAccount, SubstituteAccount, optional_account

router = APIRouter()


@router.get("/ads/latest")
def latest_ads(count: Optional[int] = Query(None, ge=1, le=50), db: Client = Depends(get_db)):
    ads = ListingService(db).get_latest_ads(count)
    return {"ok": True, "items": [with_display(ad) for ad in ads]}


@router.get("/ads")
def browse_ads(
    qualification: str = "",
    region: str = "",
    only_with_salary: bool = False,
    q: str = "",
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: Client = Depends(get_db),
):
    if region and region not in REGIONS:
        raise ValidationFailed("Ismeretlen megye.", detail="unknown_region", fields=["region"])
    if qualification and qualification.upper() not in QUALIFICATIONS:
        raise ValidationFailed("Ismeretlen végzettség.", detail="unknown_qualification", fields=["qualification"])
    filters = BrowseFilters(
        qualification=qualification,
        region=region,
        only_with_salary=only_with_salary,
        search_query=q,
        date_from=date_from,
        date_to=date_to,
    )
    ads = []
    if filters.filters_selected:
        ads = ListingService(db).get_ads_by_position_and_region(
            filters.qualification, filters.region, filters.date_from, filters.date_to
        )
    items = filter_ads(ads, only_with_salary=filters.only_with_salary, search_query=filters.search_query)
    return {
        "ok": True,
        "filters_selected": filters.filters_selected,
        "active_filters_count": filters.active_filters_count,
        "total": len(ads),
        "count": len(items),
        "items": [with_display(ad) for ad in items],
    }


# -------- wizard --------
class WizardStepBody(BaseModel):
    form: AdForm = Field(default_factory=AdForm)
    current_step: int = Field(default=1, ge=1, le=LAST_STEP)
    max_step_reached: int = Field(default=1, ge=1, le=LAST_STEP)
    action: Literal["next", "prev", "goto", "select_pharmacy", "validate"] = "validate"
    target_step: Optional[int] = None
    pharmacy_id: str = ""


@router.get("/ads/wizard/prefill")
def wizard_prefill(
    ad_id: str = "",
    pharmacy_id: str = "",
    account: dict = PharmacyAccount,
    db: Client = Depends(get_db),
):
    if ad_id:
        svc = MarketplaceService(db)
        svc.require_owned_ad(account["user_id"], ad_id)
        ad = ListingService(db).get_ad_by_id(ad_id)
        wizard = AdWizard.for_edit(ad)
    else:
        pharmacies = PharmacyRepository(db).list_by_user(account["user_id"])
        wizard = AdWizard.for_create(pharmacies, selected_id=pharmacy_id)
    return {"ok": True, "edit_mode": bool(ad_id), **wizard.state()}


@router.post("/ads/wizard/step")
def wizard_step(body: WizardStepBody, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    wizard = AdWizard(form=body.form, current_step=body.current_step, max_step_reached=body.max_step_reached)
    moved = True
    if body.action == "next":
        moved = wizard.next_step()
    elif body.action == "prev":
        moved = wizard.prev_step()
    elif body.action == "goto":
        moved = wizard.go_to_step(int(body.target_step or 0))
    elif body.action == "select_pharmacy":
        pharmacies = PharmacyRepository(db).list_by_user(account["user_id"])
        chosen = next((p for p in pharmacies if p["id"] == body.pharmacy_id), None)
        if chosen is None:
            raise NotFoundError("A patika nem található.", detail="pharmacy_not_found")
        wizard.select_pharmacy(chosen)
    return {"ok": True, "moved": moved, **wizard.state()}


# -------- ad CRUD --------
@router.post("/ads", status_code=201)
def create_ad(form: AdForm, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    ad_id = MarketplaceService(db).create_ad(account["user_id"], form)
    return {"ok": True, "ad_id": ad_id, "redirect": "/dashboard/pharmacy"}


@router.get("/ads/{ad_id}")
def ad_details(ad_id: str, account: Optional[dict] = Depends(optional_account), db: Client = Depends(get_db)):
    listing = ListingService(db)
    ad = listing.get_ad_by_id(ad_id)
    if ad is None:
        raise HTTPException(status_code=404, detail="ad_not_found")

    out = {"ok": True, "ad": with_display(ad), "is_owner": False, "has_applied": False}
    if account is None:
        return out

    if MarketplaceService(db).is_owner(account["user_id"], ad):
        apps = listing.get_ad_applications(ad_id)
        out["is_owner"] = True
        out["applications"] = apps
        out["pending_count"] = sum(1 for a in apps if a.get("status") == APP_PENDING)
    elif account["role"] == ROLE_SUBSTITUTE and SubstituteRepository(db).get(account["user_id"]):
        out["has_applied"] = ApplicationRepository(db).exists(ad_id, account["user_id"])
    return out


@router.put("/ads/{ad_id}")
def update_ad(ad_id: str, form: AdForm, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    MarketplaceService(db).update_ad(account["user_id"], ad_id, form)
    return {"ok": True, "ad_id": ad_id, "redirect": f"/ads/{ad_id}"}


@router.post("/ads/{ad_id}/close")
def close_ad(ad_id: str, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    MarketplaceService(db).close_ad(account["user_id"], ad_id)
    return {"ok": True, "ad_id": ad_id, "status": "CLOSED"}


@router.post("/ads/{ad_id}/reopen")
def reopen_ad(ad_id: str, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    MarketplaceService(db).reopen_ad(account["user_id"], ad_id)
    return {"ok": True, "ad_id": ad_id, "status": "OPEN"}


@router.delete("/ads/{ad_id}")
def delete_ad(ad_id: str, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    removed = MarketplaceService(db).delete_ad(account["user_id"], ad_id)
    return {"ok": True, "ad_id": ad_id, "applications_removed": removed}


@router.post("/ads/{ad_id}/apply", status_code=201)
def apply(ad_id: str, account: dict = SubstituteAccount, db: Client = Depends(get_db)):
    if SubstituteRepository(db).get(account["user_id"]) is None:
        raise HTTPException(status_code=403, detail="substitute_profile_missing")
    app_id = MarketplaceService(db).apply_to_ad(ad_id, account["user_id"])
    return {"ok": True, "application_id": app_id, "message": "Sikeres jelentkezés! A patika hamarosan értesíteni fog."}
