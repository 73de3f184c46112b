from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Optional

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_INCOMING_LEN = 128

_request_id_var: ContextVar[str] = ContextVar("patika_request_id", default="")


def bind_request_id(incoming: Optional[str] = None) -> str:
    """Reuse a sane incoming id (load balancer / client), otherwise mint one."""
    rid = (incoming or "").strip()
    if not rid or len(rid) > _MAX_INCOMING_LEN:
        rid = uuid.uuid4().hex
    _request_id_var.set(rid)
    return rid


def get_request_id() -> str:
    return _request_id_var.get() or ""


def clear_request_id() -> None:
    _request_id_var.set("")
