from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from storage.firestore_client import get_firestore_client
from models.schema import AD_OPEN, COL_ADS, COL_APPLICATIONS


def _docs(query) -> List[Dict[str, Any]]:
    out = []
    for snap in query.stream():
        d = snap.to_dict() or {}
        d["id"] = snap.id
        out.append(d)
    return out


class AdRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def _col(self):
        return self.db.collection(COL_ADS)

    def get(self, ad_id: str) -> Optional[Dict[str, Any]]:
        if not ad_id:
            return None
        snap = self._col().document(ad_id).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["id"] = ad_id
        return d

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        q = (
            self._col()
            .where(filter=FieldFilter("userId", "==", user_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        return _docs(q)

    def list_by_user_and_status(self, user_id: str, status: str) -> List[Dict[str, Any]]:
        q = (
            self._col()
            .where(filter=FieldFilter("userId", "==", user_id))
            .where(filter=FieldFilter("status", "==", status))
            .order_by("dateFrom", direction=firestore.Query.ASCENDING)
        )
        return _docs(q)

    def list_open(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        q = (
            self._col()
            .where(filter=FieldFilter("status", "==", AD_OPEN))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        if limit:
            q = q.limit(limit)
        return _docs(q)

    def search_open(self, position: str, region: str, date_from: datetime) -> List[Dict[str, Any]]:
        # Needs the composite index (status, position, address.region, dateFrom).
        q = (
            self._col()
            .where(filter=FieldFilter("status", "==", AD_OPEN))
            .where(filter=FieldFilter("position", "==", position.upper()))
            .where(filter=FieldFilter("address.region", "==", region))
            .where(filter=FieldFilter("dateFrom", ">=", date_from))
            .order_by("dateFrom", direction=firestore.Query.ASCENDING)
        )
        return _docs(q)

    def create(self, data: Dict[str, Any]) -> str:
        payload = {**data, "status": AD_OPEN, "createdAt": datetime.now(timezone.utc)}
        _, ref = self._col().add(payload)
        return ref.id

    def update(self, ad_id: str, data: Dict[str, Any]) -> None:
        self._col().document(ad_id).update(data)

    def set_status(self, ad_id: str, status: str) -> None:
        self._col().document(ad_id).update({"status": status})

    def delete_with_applications(self, ad_id: str) -> int:
        """Delete the ad and every application pointing at it. Returns the number of applications removed."""
        q = self.db.collection(COL_APPLICATIONS).where(filter=FieldFilter("adId", "==", ad_id))
        removed = 0
        for snap in q.stream():
            snap.reference.delete()
            removed += 1
        self._col().document(ad_id).delete()
        return removed
