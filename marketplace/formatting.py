"""Hungarian display helpers for dates, salaries and status labels."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from models.schema import AD_CLOSED, AD_OPEN, APP_ACCEPTED, APP_PENDING, APP_REJECTED, SALARY_HOURLY

MONTHS_LONG = (
    "január", "február", "március", "április", "május", "június",
    "július", "augusztus", "szeptember", "október", "november", "december",
)
MONTHS_SHORT = (
    "jan.", "febr.", "márc.", "ápr.", "máj.", "jún.",
    "júl.", "aug.", "szept.", "okt.", "nov.", "dec.",
)

STATUS_LABELS = {
    AD_OPEN: "Aktív",
    AD_CLOSED: "Lezárt",
    APP_PENDING: "Függőben",
    APP_ACCEPTED: "Elfogadva",
    APP_REJECTED: "Elutasítva",
}

NBSP = "\u00a0"


def _as_date(ts: Any) -> Optional[date]:
    if isinstance(ts, datetime):
        return ts.date()
    if isinstance(ts, date):
        return ts
    return None


def format_date(ts: Any) -> str:
    d = _as_date(ts)
    if d is None:
        return ""
    return f"{d.year}. {MONTHS_LONG[d.month - 1]} {d.day}."


def format_date_short(ts: Any) -> str:
    d = _as_date(ts)
    if d is None:
        return ""
    return f"{MONTHS_SHORT[d.month - 1]} {d.day}."


def format_date_range(date_from: Any, date_to: Any = None) -> str:
    if _as_date(date_from) is None:
        return ""
    if _as_date(date_to) is None:
        return format_date(date_from)
    return f"{format_date_short(date_from)} - {format_date_short(date_to)}"


def format_amount(amount: float) -> str:
    if float(amount).is_integer():
        txt = f"{int(amount):,}"
    else:
        txt = f"{amount:,.2f}".rstrip("0").rstrip(".")
        txt = txt.replace(".", "#")
    return txt.replace(",", NBSP).replace("#", ",")


def format_salary(salary: Optional[Dict[str, Any]]) -> str:
    if not salary or not salary.get("amount"):
        return ""
    unit = "óra" if salary.get("type") == SALARY_HOURLY else "nap"
    return f"{format_amount(salary['amount'])} Ft/{unit} ({salary.get('basis', '')})"


def get_status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def get_qualification_label(qualification: Optional[str]) -> str:
    if not qualification:
        return ""
    return qualification[0] + qualification[1:].lower()


def ad_display(ad: Dict[str, Any]) -> Dict[str, str]:
    return {
        "position": get_qualification_label(ad.get("position")),
        "status": get_status_label(str(ad.get("status") or "")),
        "dates": format_date_range(ad.get("dateFrom"), ad.get("dateTo")),
        "hours": f"{ad.get('startTime') or ''} - {ad.get('endTime') or ''}".strip(" -"),
        "salary": format_salary(ad.get("salary")),
        "created": format_date(ad.get("createdAt")),
    }


def with_display(ad: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if ad is None:
        return None
    return {**ad, "display": ad_display(ad)}
