from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from google.cloud.firestore import Client
from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from identity.client import IdentityToolkitClient
from marketplace.errors import ForbiddenError, NotFoundError, ValidationFailed
from models.schema import QUALIFICATIONS, REGIONS, ROLE_PHARMACY, ROLE_SUBSTITUTE
from repos.pharmacy_repo import PharmacyRepository
from repos.substitute_repo import SubstituteRepository
from repos.user_repo import UserRepository
from storage.firestore_client import get_firestore_client

log = logging.getLogger("patika.registration")

PASSWORD_MISMATCH = "A jelszavak nem egyeznek."
PASSWORD_TOO_SHORT = "A jelszónak legalább {n} karakter hosszúnak kell lennie."
REQUIRED_FIELDS_MISSING = "Kérjük, töltse ki az összes kötelező mezőt."

Qualification = Literal[QUALIFICATIONS]

PHARMACY_ADDRESS_FIELDS = ("name", "region", "zip", "city", "street")


def _check_region(v: str) -> str:
    if v not in REGIONS:
        raise ValueError(f"unknown region: {v}")
    return v


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)
    name: str = ""


class PharmacyProfile(BaseModel):
    name: str = ""
    zip: str = ""
    city: str = ""
    street: str = ""
    region: str = ""
    phone: str = ""
    email: str = ""

    @field_validator("region")
    @classmethod
    def _known_region(cls, v: str) -> str:
        return _check_region(v) if v else v


class SubstituteProfile(BaseModel):
    name: str = ""
    qualification: Qualification
    experience_years: int = Field(default=0, ge=0, le=80)
    available_regions: List[str] = Field(default_factory=list)
    bio: str = ""
    phone: str = ""
    email: str = ""
    is_open_to_work: bool = True
    availability_note: str = ""

    @field_validator("available_regions")
    @classmethod
    def _known_regions(cls, v: List[str]) -> List[str]:
        return [_check_region(r) for r in v]


def validate_credentials(creds: Credentials) -> None:
    if creds.password != creds.confirm_password:
        raise ValidationFailed(PASSWORD_MISMATCH, detail="password_mismatch")
    if len(creds.password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationFailed(
            PASSWORD_TOO_SHORT.format(n=settings.MIN_PASSWORD_LENGTH), detail="password_too_short"
        )


def missing_pharmacy_fields(profile: PharmacyProfile, required: tuple = PHARMACY_ADDRESS_FIELDS + ("phone",)) -> List[str]:
    return [f for f in required if not str(getattr(profile, f) or "").strip()]


def pharmacy_document(profile: PharmacyProfile) -> Dict[str, Any]:
    return {
        "name": profile.name,
        "address": {
            "zip": profile.zip,
            "city": profile.city,
            "street": profile.street,
            "region": profile.region,
        },
        "phone": profile.phone,
        "email": profile.email or None,
    }


def substitute_document(profile: SubstituteProfile, name: str = "") -> Dict[str, Any]:
    return {
        "name": name or profile.name,
        "qualification": profile.qualification,
        "experienceYears": int(profile.experience_years),
        "availableRegions": list(profile.available_regions),
        "bio": profile.bio,
        "isOpenToWork": bool(profile.is_open_to_work),
        "availabilityNote": profile.availability_note,
        "phone": profile.phone or None,
        "email": profile.email or None,
    }


def dashboard_path(role: str) -> str:
    return f"/dashboard/{(role or '').lower()}"


class AccountService:
    def __init__(self, db: Optional[Client] = None, identity: Optional[IdentityToolkitClient] = None):
        self.db = db or get_firestore_client()
        self.identity = identity or IdentityToolkitClient()
        self.users = UserRepository(self.db)
        self.pharmacies = PharmacyRepository(self.db)
        self.substitutes = SubstituteRepository(self.db)

    def register(
        self,
        role: str,
        creds: Credentials,
        pharmacy: Optional[PharmacyProfile] = None,
        substitute: Optional[SubstituteProfile] = None,
    ) -> Dict[str, Any]:
        validate_credentials(creds)
        if role == ROLE_PHARMACY and pharmacy is None:
            raise ValidationFailed(REQUIRED_FIELDS_MISSING, detail="pharmacy_profile_required")
        # checked before sign-up so no orphan account is left behind
        missing = missing_pharmacy_fields(pharmacy, PHARMACY_ADDRESS_FIELDS) if role == ROLE_PHARMACY else []
        if missing:
            raise ValidationFailed(REQUIRED_FIELDS_MISSING, detail="pharmacy_profile_required", fields=missing)
        if role == ROLE_SUBSTITUTE and substitute is None:
            raise ValidationFailed(REQUIRED_FIELDS_MISSING, detail="substitute_profile_required")

        account = self.identity.sign_up(creds.email, creds.password)
        uid = account["uid"]
        self.users.create(uid, {"role": role, "email": creds.email, "name": creds.name})

        if role == ROLE_PHARMACY:
            self.pharmacies.create(uid, pharmacy_document(pharmacy))
        else:
            self.substitutes.create(uid, substitute_document(substitute, name=creds.name))

        log.info("account_registered", extra={"extra": {"user_id": uid, "role": role}})
        return {**account, "role": role, "redirect": dashboard_path(role)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        account = self.identity.sign_in(email, password)
        user = self.users.get(account["uid"])
        if not user:
            raise NotFoundError(detail="user_data_not_found")
        role = str(user.get("role") or "")
        return {**account, "role": role, "redirect": dashboard_path(role)}

    def send_password_reset(self, email: str) -> None:
        self.identity.send_password_reset(email)


class ProfileService:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()
        self.pharmacies = PharmacyRepository(self.db)
        self.substitutes = SubstituteRepository(self.db)

    def save_pharmacy(self, user_id: str, profile: PharmacyProfile, pharmacy_id: str = "") -> str:
        if missing_pharmacy_fields(profile):
            raise ValidationFailed(REQUIRED_FIELDS_MISSING, fields=missing_pharmacy_fields(profile))
        doc = pharmacy_document(profile)
        if not pharmacy_id:
            return self.pharmacies.create(user_id, doc)
        self._require_own_pharmacy(user_id, pharmacy_id)
        self.pharmacies.update(pharmacy_id, doc)
        return pharmacy_id

    def delete_pharmacy(self, user_id: str, pharmacy_id: str) -> None:
        self._require_own_pharmacy(user_id, pharmacy_id)
        self.pharmacies.delete(pharmacy_id)

    def _require_own_pharmacy(self, user_id: str, pharmacy_id: str) -> Dict[str, Any]:
        pharmacy = self.pharmacies.get(pharmacy_id)
        if pharmacy is None:
            raise NotFoundError("A patika nem található.", detail="pharmacy_not_found")
        if pharmacy.get("userId") != user_id:
            raise ForbiddenError(detail="not_pharmacy_owner")
        return pharmacy

    def update_substitute(self, user_id: str, profile: SubstituteProfile) -> Dict[str, Any]:
        if self.substitutes.get(user_id) is None:
            raise NotFoundError("A helyettesítő profil nem található.", detail="substitute_not_found")
        doc = substitute_document(profile)
        self.substitutes.update(user_id, doc)
        return {**doc, "id": user_id}
