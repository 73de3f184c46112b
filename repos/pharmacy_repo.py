from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from storage.firestore_client import get_firestore_client
from models.schema import COL_PHARMACIES


class PharmacyRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def get(self, pharmacy_id: str) -> Optional[Dict[str, Any]]:
        if not pharmacy_id:
            return None
        snap = self.db.collection(COL_PHARMACIES).document(pharmacy_id).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["id"] = pharmacy_id
        return d

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        q = self.db.collection(COL_PHARMACIES).where(filter=FieldFilter("userId", "==", user_id))
        out = []
        for snap in q.stream():
            d = snap.to_dict() or {}
            d["id"] = snap.id
            out.append(d)
        return out

    def create(self, user_id: str, data: Dict[str, Any]) -> str:
        payload = {**data, "userId": user_id, "createdAt": datetime.now(timezone.utc)}
        _, ref = self.db.collection(COL_PHARMACIES).add(payload)
        return ref.id

    def update(self, pharmacy_id: str, data: Dict[str, Any]) -> None:
        self.db.collection(COL_PHARMACIES).document(pharmacy_id).update(data)

    def delete(self, pharmacy_id: str) -> None:
        self.db.collection(COL_PHARMACIES).document(pharmacy_id).delete()
