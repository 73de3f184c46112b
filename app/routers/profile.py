from __future__ import annotations

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client

from app.dependencies import get_db
from marketplace.registration import PharmacyProfile, ProfileService, SubstituteProfile
from repos.pharmacy_repo import PharmacyRepository
from security.firebase_auth import PharmacyAccount, SubstituteAccount

router = APIRouter()


@router.get("/profile/pharmacies")
def list_pharmacies(account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    return {"ok": True, "items": PharmacyRepository(db).list_by_user(account["user_id"])}


@router.post("/profile/pharmacies", status_code=201)
def create_pharmacy(body: PharmacyProfile, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    pharmacy_id = ProfileService(db).save_pharmacy(account["user_id"], body)
    return {"ok": True, "pharmacy_id": pharmacy_id, "message": "Új patika sikeresen létrehozva!"}


@router.put("/profile/pharmacies/{pharmacy_id}")
def update_pharmacy(pharmacy_id: str, body: PharmacyProfile, account: dict = PharmacyAccount,
                    db: Client = Depends(get_db)):
    ProfileService(db).save_pharmacy(account["user_id"], body, pharmacy_id=pharmacy_id)
    return {"ok": True, "pharmacy_id": pharmacy_id, "message": "Patika sikeresen frissítve!"}


@router.delete("/profile/pharmacies/{pharmacy_id}")
def delete_pharmacy(pharmacy_id: str, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    ProfileService(db).delete_pharmacy(account["user_id"], pharmacy_id)
    return {"ok": True, "pharmacy_id": pharmacy_id, "message": "Patika sikeresen törölve!"}


@router.put("/profile/substitute")
def update_substitute(body: SubstituteProfile, account: dict = SubstituteAccount, db: Client = Depends(get_db)):
    substitute = ProfileService(db).update_substitute(account["user_id"], body)
    return {"ok": True, "substitute": substitute, "message": "Profil sikeresen frissítve!"}
