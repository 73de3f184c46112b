"""
Five-step ad form.

The wizard only tracks where the user is (current_step) and how far they
got (max_step_reached); each step is gated by its required fields.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, field_validator

from models.schema import QUALIFICATIONS, REGIONS, SALARY_BASES, SALARY_TYPES, SHIFT_TYPES

STEPS = (
    (1, "Patika"),
    (2, "Pozíció"),
    (3, "Időpont"),
    (4, "Díjazás"),
    (5, "Részletek"),
)
LAST_STEP = len(STEPS)

STEP_REQUIRED_FIELDS: Dict[int, tuple] = {
    1: ("pharmacy_name", "region", "postal_code", "city", "street"),
    2: ("position_type",),
    3: ("start_date", "start_time", "end_time"),
    4: (),
    5: ("description",),
}


class AdForm(BaseModel):
    selected_pharmacy_id: str = ""
    pharmacy_name: str = ""
    postal_code: str = ""
    city: str = ""
    street: str = ""
    region: str = ""
    email: str = ""
    phone: str = ""

    position_type: Literal[("",) + QUALIFICATIONS] = ""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    shift_type: Literal[SHIFT_TYPES] = "egész nap"
    start_time: str = ""
    end_time: str = ""

    compensation_type: Literal[SALARY_TYPES] = "órabér"
    compensation_basis: Literal[SALARY_BASES] = "nettó"
    compensation_amount: Optional[float] = None
    invoice_capable: bool = False

    description: str = ""
    experience_years: Optional[int] = None
    notes: str = ""

    @field_validator("region")
    @classmethod
    def _known_region(cls, v: str) -> str:
        # empty while the wizard is still on an earlier step
        if v and v not in REGIONS:
            raise ValueError(f"unknown region: {v}")
        return v


def _filled(v: Any) -> bool:
    if isinstance(v, str):
        return bool(v.strip())
    return v is not None


def validate_step(form: AdForm, step: int) -> List[str]:
    """Names of the required fields still missing for `step`."""
    return [name for name in STEP_REQUIRED_FIELDS.get(step, ()) if not _filled(getattr(form, name))]


def validate_all(form: AdForm) -> Dict[int, List[str]]:
    out = {}
    for step, _name in STEPS:
        missing = validate_step(form, step)
        if missing:
            out[step] = missing
    return out


def apply_pharmacy(form: AdForm, pharmacy: Dict[str, Any]) -> AdForm:
    address = pharmacy.get("address") or {}
    return form.model_copy(update={
        "selected_pharmacy_id": pharmacy.get("id") or "",
        "pharmacy_name": pharmacy.get("name") or "",
        "postal_code": address.get("zip") or "",
        "city": address.get("city") or "",
        "street": address.get("street") or "",
        "region": address.get("region") or "",
        "email": pharmacy.get("email") or "",
        "phone": pharmacy.get("phone") or "",
    })


def _to_date(v: Any) -> Optional[date]:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    return None


def form_from_ad(ad: Dict[str, Any]) -> AdForm:
    pharmacy = ad.get("pharmacy") or {}
    address = ad.get("address") or {}
    salary = ad.get("salary") or {}
    return AdForm(
        selected_pharmacy_id=ad.get("pharmacyId") or "",
        pharmacy_name=pharmacy.get("name") or ad.get("name") or "",
        postal_code=address.get("zip") or "",
        city=address.get("city") or "",
        street=address.get("street") or "",
        region=address.get("region") or "",
        email=ad.get("email") or pharmacy.get("email") or "",
        phone=ad.get("phone") or pharmacy.get("phone") or "",
        position_type=ad.get("position") or "",
        start_date=_to_date(ad.get("dateFrom")),
        end_date=_to_date(ad.get("dateTo")),
        start_time=ad.get("startTime") or "",
        end_time=ad.get("endTime") or "",
        compensation_type=salary.get("type") or "órabér",
        compensation_basis=salary.get("basis") or "nettó",
        compensation_amount=salary.get("amount") or None,
        invoice_capable=bool(salary.get("invoiceRequired")),
        description=ad.get("description") or "",
        experience_years=ad.get("experienceRequired") or None,
        notes=ad.get("notes") or "",
    )


def _midnight_utc(d: Optional[date]) -> Optional[datetime]:
    if d is None:
        return None
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def to_ad_payload(form: AdForm) -> Dict[str, Any]:
    """Stored ad body shared by create and edit; owner and status fields are added by the caller."""
    return {
        "position": form.position_type,
        "name": form.pharmacy_name,
        "phone": form.phone or "",
        "email": form.email or "",
        "address": {
            "zip": form.postal_code,
            "city": form.city,
            "street": form.street,
            "region": form.region,
        },
        "dateFrom": _midnight_utc(form.start_date),
        "dateTo": _midnight_utc(form.end_date),
        "startTime": form.start_time,
        "endTime": form.end_time,
        "salary": {
            "amount": form.compensation_amount or None,
            "type": form.compensation_type,
            "basis": form.compensation_basis,
            "invoiceRequired": form.invoice_capable,
        },
        "description": form.description,
        "experienceRequired": form.experience_years or None,
        "notes": form.notes,
    }


@dataclass
class AdWizard:
    form: AdForm = field(default_factory=AdForm)
    current_step: int = 1
    max_step_reached: int = 1

    @classmethod
    def for_create(cls, pharmacies: List[Dict[str, Any]], selected_id: str = "") -> "AdWizard":
        form = AdForm()
        chosen = next((p for p in pharmacies if p.get("id") == selected_id), None)
        if chosen is None and pharmacies:
            chosen = pharmacies[0]
        if chosen is not None:
            form = apply_pharmacy(form, chosen)
        return cls(form=form)

    @classmethod
    def for_edit(cls, ad: Dict[str, Any]) -> "AdWizard":
        # Every step of an existing ad is reachable.
        return cls(form=form_from_ad(ad), max_step_reached=LAST_STEP)

    def _clamp(self) -> None:
        self.current_step = min(max(int(self.current_step), 1), LAST_STEP)
        self.max_step_reached = min(max(int(self.max_step_reached), self.current_step), LAST_STEP)

    def missing(self) -> List[str]:
        return validate_step(self.form, self.current_step)

    def next_step(self) -> bool:
        self._clamp()
        if self.current_step >= LAST_STEP or self.missing():
            return False
        self.current_step += 1
        self.max_step_reached = max(self.max_step_reached, self.current_step)
        return True

    def prev_step(self) -> bool:
        self._clamp()
        if self.current_step <= 1:
            return False
        self.current_step -= 1
        return True

    def go_to_step(self, step: int) -> bool:
        self._clamp()
        if step < 1 or step > self.max_step_reached:
            return False
        self.current_step = step
        return True

    def select_pharmacy(self, pharmacy: Dict[str, Any]) -> None:
        self.form = apply_pharmacy(self.form, pharmacy)

    def can_submit(self) -> bool:
        self._clamp()
        return self.current_step == LAST_STEP and not validate_all(self.form)

    def state(self) -> Dict[str, Any]:
        self._clamp()
        return {
            "form": self.form.model_dump(mode="json"),
            "current_step": self.current_step,
            "max_step_reached": self.max_step_reached,
            "steps": [
                {
                    "id": sid,
                    "name": name,
                    "current": sid == self.current_step,
                    "completed": sid < self.current_step,
                    "reachable": sid <= self.max_step_reached,
                }
                for sid, name in STEPS
            ],
            "missing": self.missing(),
            "can_submit": self.can_submit(),
        }
