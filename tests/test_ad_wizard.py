from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from marketplace.ad_wizard import LAST_STEP, AdForm, AdWizard, to_ad_payload, validate_all, validate_step

PHARMACY = {
    "id": "ph-1",
    "name": "Központi Patika",
    "address": {"zip": "1051", "city": "Budapest", "street": "Fő utca 1.", "region": "Budapest"},
    "phone": "+36 1 111 1111",
    "email": "",
}


def _complete_form(**overrides) -> AdForm:
    data = dict(
        selected_pharmacy_id="ph-1",
        pharmacy_name="Központi Patika",
        postal_code="1051",
        city="Budapest",
        street="Fő utca 1.",
        region="Budapest",
        position_type="GYÓGYSZERÉSZ",
        start_date=date(2030, 5, 1),
        start_time="08:00",
        end_time="16:00",
        description="Helyettesítés",
    )
    data.update(overrides)
    return AdForm(**data)


def test_step_one_cannot_advance_without_pharmacy_fields():
    wiz = AdWizard()
    assert wiz.next_step() is False
    assert wiz.current_step == 1
    assert set(wiz.missing()) == {"pharmacy_name", "region", "postal_code", "city", "street"}


def test_advance_and_reachability():
    wiz = AdWizard.for_create([PHARMACY])
    assert wiz.next_step() is True
    assert (wiz.current_step, wiz.max_step_reached) == (2, 2)

    # step 2 needs a position
    assert wiz.next_step() is False
    assert wiz.go_to_step(3) is False

    assert wiz.prev_step() is True
    assert wiz.current_step == 1
    assert wiz.go_to_step(2) is True
    assert wiz.prev_step() is True
    assert wiz.prev_step() is False


def test_compensation_step_is_always_valid():
    assert validate_step(AdForm(), 4) == []


def test_whitespace_does_not_satisfy_required_field():
    assert validate_step(AdForm(description="   "), 5) == ["description"]


def test_submit_only_on_last_step_with_everything_valid():
    wiz = AdWizard(form=_complete_form())
    for _ in range(LAST_STEP - 1):
        assert wiz.can_submit() is False
        assert wiz.next_step() is True
    assert wiz.current_step == LAST_STEP
    assert wiz.can_submit() is True
    assert wiz.next_step() is False

    wiz.form = wiz.form.model_copy(update={"description": ""})
    assert wiz.can_submit() is False


def test_for_create_prefills_selected_pharmacy():
    other = {**PHARMACY, "id": "ph-2", "name": "Alma Patika"}
    assert AdWizard.for_create([PHARMACY, other]).form.pharmacy_name == "Központi Patika"
    wiz = AdWizard.for_create([PHARMACY, other], selected_id="ph-2")
    assert wiz.form.selected_pharmacy_id == "ph-2"
    assert wiz.form.pharmacy_name == "Alma Patika"
    assert wiz.form.postal_code == "1051"
    assert AdWizard.for_create([]).form.pharmacy_name == ""


def test_for_edit_unlocks_every_step():
    ad = {
        "pharmacyId": "ph-1",
        "position": "ASSZISZTENS",
        "dateFrom": datetime(2030, 1, 2, tzinfo=timezone.utc),
        "address": PHARMACY["address"],
        "startTime": "08:00",
        "endTime": "12:00",
        "salary": {"amount": 4000, "type": "napidíj", "basis": "bruttó", "invoiceRequired": True},
        "description": "x",
        "pharmacy": PHARMACY,
    }
    wiz = AdWizard.for_edit(ad)
    assert wiz.max_step_reached == LAST_STEP
    assert wiz.go_to_step(5) is True
    assert wiz.form.start_date == date(2030, 1, 2)
    assert wiz.form.compensation_type == "napidíj"
    assert wiz.form.invoice_capable is True
    assert wiz.form.phone == PHARMACY["phone"]
    assert validate_all(wiz.form) == {}


def test_payload_conversion():
    payload = to_ad_payload(_complete_form(compensation_amount=0, experience_years=None))
    assert payload["dateFrom"] == datetime(2030, 5, 1, tzinfo=timezone.utc)
    assert payload["dateTo"] is None
    assert payload["salary"]["amount"] is None
    assert payload["experienceRequired"] is None
    assert payload["address"]["region"] == "Budapest"

    payload = to_ad_payload(_complete_form(compensation_amount=5500, experience_years=2, end_date=date(2030, 5, 3)))
    assert payload["salary"]["amount"] == 5500
    assert payload["experienceRequired"] == 2
    assert payload["dateTo"] == datetime(2030, 5, 3, tzinfo=timezone.utc)


def test_state_reports_steps():
    state = AdWizard.for_create([PHARMACY]).state()
    assert state["current_step"] == 1
    assert [s["name"] for s in state["steps"]] == ["Patika", "Pozíció", "Időpont", "Díjazás", "Részletek"]
    assert state["steps"][1]["reachable"] is False
    assert state["can_submit"] is False


def test_form_region_must_be_known():
    assert AdForm(region="").region == ""
    assert AdForm(region="Zala").region == "Zala"
    with pytest.raises(ValidationError):
        AdForm(region="Narnia")


def test_form_enums_follow_schema():
    assert AdForm(position_type="ASSZISZTENS", shift_type="délután", compensation_type="napidíj").shift_type == "délután"
    with pytest.raises(ValidationError):
        AdForm(position_type="VEGYÉSZ")
    with pytest.raises(ValidationError):
        AdForm(compensation_basis="havi")
