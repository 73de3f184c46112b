"""
In-memory stand-ins for the Firestore client and the Identity Toolkit client.

Only the calls the repositories make are supported.
"""
from __future__ import annotations

import copy
import uuid
from typing import Any, Dict, List, Optional, Tuple

from marketplace.errors import AuthError

_MISSING = object()


def _lookup(doc: Dict[str, Any], path: str) -> Any:
    cur: Any = doc
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return _MISSING
        cur = cur[part]
    return cur


def _match(value: Any, op: str, expected: Any) -> bool:
    if value is _MISSING or value is None:
        return False
    if op == "==":
        return value == expected
    if op == "in":
        return value in expected
    if op == ">=":
        return value >= expected
    if op == ">":
        return value > expected
    if op == "<=":
        return value <= expected
    if op == "<":
        return value < expected
    raise NotImplementedError(op)


class FakeSnapshot:
    def __init__(self, ref: "FakeDocumentRef", data: Optional[Dict[str, Any]]):
        self.reference = ref
        self.id = ref.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, client: "FakeFirestore", collection: str, doc_id: str):
        self._client = client
        self._collection = collection
        self.id = doc_id

    def _store(self) -> Dict[str, Dict[str, Any]]:
        return self._client.store.setdefault(self._collection, {})

    def get(self, **_kw) -> FakeSnapshot:
        return FakeSnapshot(self, self._store().get(self.id))

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        if merge and self.id in self._store():
            self._store()[self.id].update(copy.deepcopy(data))
        else:
            self._store()[self.id] = copy.deepcopy(data)

    def update(self, data: Dict[str, Any]) -> None:
        if self.id not in self._store():
            raise KeyError(f"{self._collection}/{self.id}")
        self._store()[self.id].update(copy.deepcopy(data))

    def delete(self) -> None:
        self._store().pop(self.id, None)


class FakeQuery:
    def __init__(self, client: "FakeFirestore", collection: str):
        self._client = client
        self._collection = collection
        self._filters: List[Tuple[str, str, Any]] = []
        self._orders: List[Tuple[str, str]] = []
        self._limit: Optional[int] = None

    def _clone(self) -> "FakeQuery":
        q = FakeQuery(self._client, self._collection)
        q._filters = list(self._filters)
        q._orders = list(self._orders)
        q._limit = self._limit
        return q

    def where(self, field_path: Optional[str] = None, op_string: Optional[str] = None, value: Any = None,
              *, filter=None) -> "FakeQuery":
        q = self._clone()
        if filter is not None:
            q._filters.append((filter.field_path, filter.op_string, filter.value))
        else:
            q._filters.append((field_path, op_string, value))
        self._client.queries.append(q._filters[-1])
        return q

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "FakeQuery":
        q = self._clone()
        q._orders.append((field_path, direction))
        return q

    def limit(self, count: int) -> "FakeQuery":
        q = self._clone()
        q._limit = count
        return q

    def stream(self):
        store = self._client.store.get(self._collection, {})
        rows = [
            (doc_id, data)
            for doc_id, data in store.items()
            if all(_match(_lookup(data, f), op, v) for f, op, v in self._filters)
        ]
        for field_path, direction in reversed(self._orders):
            rows = [r for r in rows if _lookup(r[1], field_path) is not _MISSING]
            rows.sort(key=lambda r: _lookup(r[1], field_path), reverse=(direction == "DESCENDING"))
        if self._limit is not None:
            rows = rows[: self._limit]
        for doc_id, data in rows:
            ref = FakeDocumentRef(self._client, self._collection, doc_id)
            yield FakeSnapshot(ref, data)


class FakeCollection(FakeQuery):
    def document(self, doc_id: Optional[str] = None) -> FakeDocumentRef:
        return FakeDocumentRef(self._client, self._collection, doc_id or uuid.uuid4().hex[:20])

    def add(self, data: Dict[str, Any]):
        ref = self.document()
        ref.set(data)
        return None, ref


class FakeFirestore:
    def __init__(self):
        self.store: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.queries: List[Tuple[str, str, Any]] = []

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def seed(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.store.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def docs(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self.store.get(collection, {})


class FakeIdentity:
    def __init__(self):
        self.accounts: Dict[str, Tuple[str, str]] = {}  # email -> (uid, password)
        self.reset_requests: List[str] = []
        self.reset_error: Optional[AuthError] = None

    def _account(self, uid: str, email: str) -> Dict[str, Any]:
        return {"uid": uid, "email": email, "id_token": uid, "refresh_token": "r", "expires_in": 3600}

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        if email in self.accounts:
            raise AuthError("Hiba történt a regisztráció során. Kérjük, próbáld újra.",
                            detail="auth/email-already-in-use", status_code=400)
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, password)
        return self._account(uid, email)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        uid, stored = self.accounts.get(email, ("", None))
        if stored is None or stored != password:
            raise AuthError("Hibás email cím vagy jelszó.", detail="auth/invalid-credential")
        return self._account(uid, email)

    def send_password_reset(self, email: str) -> None:
        if self.reset_error is not None:
            raise self.reset_error
        self.reset_requests.append(email)
