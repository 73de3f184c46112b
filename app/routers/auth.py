from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client
from pydantic import BaseModel, Field

from app.dependencies import get_db, get_identity_client
from identity.client import IdentityToolkitClient
from marketplace.registration import AccountService, Credentials, PharmacyProfile, SubstituteProfile
from models.schema import ROLE_PHARMACY, ROLES
from repos.pharmacy_repo import PharmacyRepository
from repos.substitute_repo import SubstituteRepository
from security.firebase_auth import require_account

log = logging.getLogger("patika.router.auth")
router = APIRouter()


class RegisterBody(BaseModel):
    role: Literal[ROLES]
    credentials: Credentials
    pharmacy: Optional[PharmacyProfile] = None
    substitute: Optional[SubstituteProfile] = None


class LoginBody(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class ForgotPasswordBody(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)


@router.post("/auth/register", status_code=201)
def register(
    body: RegisterBody,
    db: Client = Depends(get_db),
    identity: IdentityToolkitClient = Depends(get_identity_client),
):
    out = AccountService(db, identity).register(body.role, body.credentials, body.pharmacy, body.substitute)
    return {"ok": True, **out}


@router.post("/auth/login")
def login(
    body: LoginBody,
    db: Client = Depends(get_db),
    identity: IdentityToolkitClient = Depends(get_identity_client),
):
    out = AccountService(db, identity).login(body.email, body.password)
    log.info("auth_login", extra={"extra": {"user_id": out["uid"], "role": out["role"]}})
    return {"ok": True, **out}


@router.post("/auth/forgot-password")
def forgot_password(
    body: ForgotPasswordBody,
    db: Client = Depends(get_db),
    identity: IdentityToolkitClient = Depends(get_identity_client),
):
    AccountService(db, identity).send_password_reset(body.email.strip())
    return {"ok": True, "email": body.email.strip()}


@router.get("/me")
def me(account: dict = Depends(require_account), db: Client = Depends(get_db)):
    user_id = account["user_id"]
    pharmacies = None
    substitute = None
    if account["role"] == ROLE_PHARMACY:
        pharmacies = PharmacyRepository(db).list_by_user(user_id)
    else:
        substitute = SubstituteRepository(db).get(user_id)
    return {
        "ok": True,
        "user": account["user"],
        "role": account["role"],
        "pharmacies": pharmacies,
        "substitute": substitute,
    }
