from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def day(offset: int) -> datetime:
    return datetime.combine(date.today() + timedelta(days=offset), time.min, tzinfo=timezone.utc)


def make_ad(**overrides):
    ad = {
        "userId": "owner-1",
        "pharmacyId": "ph-1",
        "position": "GYÓGYSZERÉSZ",
        "dateFrom": day(3),
        "dateTo": None,
        "address": {"zip": "1051", "city": "Budapest", "street": "Fő utca 1.", "region": "Budapest"},
        "startTime": "08:00",
        "endTime": "16:00",
        "salary": {"amount": 5000, "type": "órabér", "basis": "nettó", "invoiceRequired": False},
        "description": "Hétvégi helyettesítés",
        "status": "OPEN",
        "createdAt": day(-1),
    }
    ad.update(overrides)
    return ad


def auth(uid: str) -> dict:
    return {"Authorization": f"Bearer {uid}"}
