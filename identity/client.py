from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import settings
from marketplace.errors import AuthError, GENERIC_ERROR_MESSAGE

log = logging.getLogger("patika.identity")

# Identity Toolkit REST messages -> Firebase client SDK style codes.
VENDOR_CODES = {
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_EMAIL": "auth/invalid-email",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "USER_DISABLED": "auth/user-disabled",
    "WEAK_PASSWORD": "auth/weak-password",
    "MISSING_PASSWORD": "auth/missing-password",
}

RESET_MESSAGES = {
    "auth/user-not-found": "Ezzel az email címmel nincs regisztrált felhasználó.",
    "auth/invalid-email": "Érvénytelen email cím.",
    "auth/too-many-requests": "Túl sok próbálkozás. Kérjük, próbálja újra később.",
}

LOGIN_FAILED = "Hibás email cím vagy jelszó."
REGISTRATION_FAILED = "Hiba történt a regisztráció során. Kérjük, próbáld újra."


def vendor_code(message: str) -> str:
    # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    key = (message or "").split(":", 1)[0].strip().upper()
    return VENDOR_CODES.get(key, "auth/unknown")


def reset_message(code: str) -> str:
    return RESET_MESSAGES.get(code, GENERIC_ERROR_MESSAGE)


class IdentityToolkitClient:
    """Email/password accounts on Firebase Authentication over its REST API."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key or settings.FIREBASE_WEB_API_KEY
        self.base_url = (base_url or settings.IDENTITY_TOOLKIT_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SEC

    def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise RuntimeError("FIREBASE_WEB_API_KEY not configured")
        url = f"{self.base_url}/accounts:{method}"
        r = httpx.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code >= 400:
            msg = str(((data.get("error") or {}).get("message")) or "")
            code = vendor_code(msg)
            log.warning(
                "identity_error",
                extra={"extra": {"event": "identity_error", "method": method, "status_code": r.status_code, "code": code}},
            )
            raise AuthError(detail=code)
        return data

    @staticmethod
    def _account(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "uid": data.get("localId", ""),
            "email": data.get("email", ""),
            "id_token": data.get("idToken", ""),
            "refresh_token": data.get("refreshToken", ""),
            "expires_in": int(data.get("expiresIn") or 0),
        }

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        try:
            data = self._post("signUp", {"email": email, "password": password, "returnSecureToken": True})
        except AuthError as e:
            raise AuthError(REGISTRATION_FAILED, detail=e.detail, status_code=400) from e
        return self._account(data)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        try:
            data = self._post(
                "signInWithPassword", {"email": email, "password": password, "returnSecureToken": True}
            )
        except AuthError as e:
            raise AuthError(LOGIN_FAILED, detail=e.detail) from e
        return self._account(data)

    def send_password_reset(self, email: str) -> None:
        try:
            payload = {"requestType": "PASSWORD_RESET", "email": email}
            if settings.APP_BASE_URL:
                # the emailed link returns the user to the login page
                payload["continueUrl"] = f"{settings.APP_BASE_URL.rstrip('/')}/login"
            self._post("sendOobCode", payload)
        except AuthError as e:
            raise AuthError(reset_message(e.detail), detail=e.detail, status_code=400) from e
