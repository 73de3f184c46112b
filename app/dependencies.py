"""
Dependency wiring for the FastAPI app; tests override these.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from google.cloud.firestore import Client

from identity.client import IdentityToolkitClient
from storage.firestore_client import get_firestore_client


def get_db() -> Client:
    return get_firestore_client()


def get_identity_client() -> IdentityToolkitClient:
    return IdentityToolkitClient()


def get_token_verifier() -> Callable[[str], Dict[str, Any]]:
    from security.firebase_auth import verify_firebase_id_token

    return verify_firebase_id_token
