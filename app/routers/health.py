from __future__ import annotations

import os
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client

from app.dependencies import get_db
from config.settings import settings
from models.schema import COL_SYSTEM

router = APIRouter()


def _firestore_probe(db: Client, timeout_s: float = 0.20) -> Dict[str, Any]:
    """
    Read-only, bounded-time Firestore connectivity probe.
    - No PII
    - No writes
    - Uses a fixed doc path.
    """
    try:
        t0 = time.time()
        db.collection(COL_SYSTEM).document("healthz").get(timeout=timeout_s)
        dt_ms = int((time.time() - t0) * 1000)
        return {"ok": True, "latency_ms": dt_ms}
    except Exception as e:
        return {"ok": False, "error_type": type(e).__name__, "message": str(e)}


@router.get("/health")
def health(db: Client = Depends(get_db)):
    fs = _firestore_probe(db)
    return {
        "ok": bool(fs.get("ok", False)),
        "service": "patika-api",
        "revision": os.getenv("K_REVISION") or "",
        "environment": settings.ENVIRONMENT,
        "firestore_ok": bool(fs.get("ok", False)),
        "firestore": fs,
        "time_unix": time.time(),
    }
