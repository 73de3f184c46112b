from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client
from pydantic import BaseModel

from app.dependencies import get_db
from marketplace.applications import REVIEW_STATUSES, MarketplaceService
from security.firebase_auth import PharmacyAccount

router = APIRouter()


class StatusBody(BaseModel):
    status: Literal[REVIEW_STATUSES]


@router.post("/applications/{application_id}/status")
def set_status(application_id: str, body: StatusBody, account: dict = PharmacyAccount, db: Client = Depends(get_db)):
    app = MarketplaceService(db).set_application_status(account["user_id"], application_id, body.status)
    return {"ok": True, "application": app}
