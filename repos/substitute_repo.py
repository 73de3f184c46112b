from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from google.cloud.firestore import Client
from storage.firestore_client import get_firestore_client
from models.schema import COL_SUBSTITUTES


class SubstituteRepository:
    """substitutes/{uid}: the profile shares the Firebase uid as document id."""

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def get(self, substitute_id: str) -> Optional[Dict[str, Any]]:
        if not substitute_id:
            return None
        snap = self.db.collection(COL_SUBSTITUTES).document(substitute_id).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["id"] = substitute_id
        return d

    def create(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {**data, "userId": user_id, "createdAt": datetime.now(timezone.utc)}
        self.db.collection(COL_SUBSTITUTES).document(user_id).set(payload, merge=False)
        return {**payload, "id": user_id}

    def update(self, substitute_id: str, data: Dict[str, Any]) -> None:
        self.db.collection(COL_SUBSTITUTES).document(substitute_id).update(data)
