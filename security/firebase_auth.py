from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request
from google.auth.transport import requests as google_requests
from google.cloud.firestore import Client
from google.oauth2 import id_token

from app.dependencies import get_db, get_token_verifier
from config.settings import settings
from models.schema import ROLE_PHARMACY, ROLE_SUBSTITUTE
from repos.user_repo import UserRepository

log = logging.getLogger("patika.firebase_auth")

TokenVerifier = Callable[[str], Dict[str, Any]]


def verify_firebase_id_token(token: str) -> Dict[str, Any]:
    audience = settings.FIREBASE_PROJECT_ID
    if not audience:
        # Fail closed: require explicit project to be configured
        raise HTTPException(status_code=500, detail="firebase_project_not_configured")
    try:
        return id_token.verify_firebase_token(token, google_requests.Request(), audience=audience)
    except Exception as e:
        log.warning("firebase_token verify failed", extra={"extra": {"error": str(e)}})
        raise HTTPException(status_code=401, detail="invalid_id_token")


def parse_bearer_token(request: Request) -> str:
    h = request.headers.get("Authorization", "").strip()
    if not h:
        return ""
    parts = h.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="invalid_auth_header")
    return parts[1].strip()


def _account(claims: Dict[str, Any], db: Client) -> Dict[str, Any]:
    uid = str(claims.get("user_id") or claims.get("sub") or "")
    if not uid:
        raise HTTPException(status_code=401, detail="invalid_id_token")
    user = UserRepository(db).get(uid)
    if not user:
        raise HTTPException(status_code=403, detail="user_data_not_found")
    return {
        "user_id": uid,
        "email": str(claims.get("email") or user.get("email") or ""),
        "role": str(user.get("role") or ""),
        "user": user,
    }


def optional_account(
    request: Request,
    db: Client = Depends(get_db),
    verify: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Dict[str, Any]]:
    token = parse_bearer_token(request)
    if not token:
        return None
    return _account(verify(token), db)


def require_account(account: Optional[Dict[str, Any]] = Depends(optional_account)) -> Dict[str, Any]:
    if account is None:
        raise HTTPException(status_code=401, detail="missing_auth")
    return account


def require_pharmacy(account: Dict[str, Any] = Depends(require_account)) -> Dict[str, Any]:
    if account["role"] != ROLE_PHARMACY:
        raise HTTPException(status_code=403, detail="pharmacy_role_required")
    return account


def require_substitute(account: Dict[str, Any] = Depends(require_account)) -> Dict[str, Any]:
    if account["role"] != ROLE_SUBSTITUTE:
        raise HTTPException(status_code=403, detail="substitute_role_required")
    return account


PharmacyAccount = Depends(require_pharmacy)
SubstituteAccount = Depends(require_substitute)
