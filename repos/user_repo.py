from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from google.cloud.firestore import Client
from storage.firestore_client import get_firestore_client
from models.schema import COL_USERS


class UserRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        snap = self.db.collection(COL_USERS).document(user_id).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["id"] = user_id
        return d

    def create(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {**data, "createdAt": datetime.now(timezone.utc)}
        self.db.collection(COL_USERS).document(user_id).set(payload, merge=False)
        return {**payload, "id": user_id}

    def get_email(self, user_id: str) -> str:
        user = self.get(user_id) or {}
        return str(user.get("email") or "")
