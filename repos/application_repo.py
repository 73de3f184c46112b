from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from config.settings import settings
from storage.firestore_client import get_firestore_client
from models.schema import APP_PENDING, COL_APPLICATIONS


def _docs(query) -> List[Dict[str, Any]]:
    out = []
    for snap in query.stream():
        d = snap.to_dict() or {}
        d["id"] = snap.id
        out.append(d)
    return out


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    size = max(1, int(size))
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class ApplicationRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def _col(self):
        return self.db.collection(COL_APPLICATIONS)

    def get(self, application_id: str) -> Optional[Dict[str, Any]]:
        if not application_id:
            return None
        snap = self._col().document(application_id).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["id"] = application_id
        return d

    def list_by_ad(self, ad_id: str) -> List[Dict[str, Any]]:
        q = (
            self._col()
            .where(filter=FieldFilter("adId", "==", ad_id))
            .order_by("appliedAt", direction=firestore.Query.DESCENDING)
        )
        return _docs(q)

    def list_by_substitute(self, substitute_id: str) -> List[Dict[str, Any]]:
        q = (
            self._col()
            .where(filter=FieldFilter("substituteId", "==", substitute_id))
            .order_by("appliedAt", direction=firestore.Query.DESCENDING)
        )
        return _docs(q)

    def list_by_ads(self, ad_ids: Sequence[str]) -> List[Dict[str, Any]]:
        # "in" filters are capped, so query batch by batch; ordering holds within a batch only.
        out: List[Dict[str, Any]] = []
        for batch in chunked([a for a in ad_ids if a], settings.APPLICATIONS_IN_BATCH):
            q = (
                self._col()
                .where(filter=FieldFilter("adId", "in", batch))
                .order_by("appliedAt", direction=firestore.Query.DESCENDING)
            )
            out.extend(_docs(q))
        return out

    def exists(self, ad_id: str, substitute_id: str) -> bool:
        q = (
            self._col()
            .where(filter=FieldFilter("adId", "==", ad_id))
            .where(filter=FieldFilter("substituteId", "==", substitute_id))
            .limit(1)
        )
        return any(True for _ in q.stream())

    def create(self, ad_id: str, substitute_id: str) -> str:
        payload = {
            "adId": ad_id,
            "substituteId": substitute_id,
            "status": APP_PENDING,
            "appliedAt": datetime.now(timezone.utc),
        }
        _, ref = self._col().add(payload)
        return ref.id

    def set_status(self, application_id: str, status: str) -> None:
        self._col().document(application_id).update({"status": status})
