from __future__ import annotations

from functools import lru_cache

from google.cloud import firestore
from config.settings import settings


@lru_cache(maxsize=1)
def get_firestore_client() -> firestore.Client:
    # Empty project falls back to the ADC default; empty database means "(default)".
    kwargs = {}
    if settings.FIRESTORE_PROJECT_ID:
        kwargs["project"] = settings.FIRESTORE_PROJECT_ID
    if settings.FIRESTORE_DATABASE:
        kwargs["database"] = settings.FIRESTORE_DATABASE
    return firestore.Client(**kwargs)
