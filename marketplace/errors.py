from __future__ import annotations

from typing import List, Optional

GENERIC_ERROR_MESSAGE = "Hiba történt. Kérjük, próbálja újra."


class MarketplaceError(Exception):
    """Carries a machine-readable detail plus the Hungarian message shown to the user."""

    status_code = 400
    detail = "marketplace_error"
    message = GENERIC_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None,
                 fields: Optional[List[str]] = None, status_code: Optional[int] = None):
        self.message = message or self.message
        self.detail = detail or self.detail
        self.status_code = status_code or self.status_code
        self.fields = list(fields or [])
        super().__init__(self.message)


class NotFoundError(MarketplaceError):
    status_code = 404
    detail = "not_found"
    message = "A keresett elem nem található."


class ForbiddenError(MarketplaceError):
    status_code = 403
    detail = "forbidden"
    message = "Nincs jogosultságod ehhez a művelethez."


class ValidationFailed(MarketplaceError):
    status_code = 422
    detail = "validation_failed"
    message = "Kérjük, töltse ki az összes kötelező mezőt."


class AlreadyAppliedError(MarketplaceError):
    status_code = 409
    detail = "already_applied"
    message = "Már jelentkeztél erre a hirdetésre."


class AdClosedError(MarketplaceError):
    status_code = 409
    detail = "ad_closed"
    message = "Erre a hirdetésre már nem lehet jelentkezni."


class AuthError(MarketplaceError):
    status_code = 401
    detail = "auth_failed"
