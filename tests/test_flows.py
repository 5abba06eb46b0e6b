# tests/test_flows.py

"""
Tests for the flow step tables: each gate blocks with the expected
message and opens once its fields are filled in.
"""

from datetime import date, timedelta

import pytest

from core.wizard import Wizard, WizardState, can_advance, validate_step
from flows import FLOWS, agent_onboarding, booking, maintenance, owner_lead, vendor_registration, visit
from models.profile import BaseProfile
from services import terminal_actions


TOMORROW = (date.today() + timedelta(days=1)).isoformat()

PROFILE = BaseProfile(
    id="user-1",
    full_name="Asha Rao",
    email="asha@example.com",
    phone="+91 98765-43210",
)


def at(steps, step_id, data):
    return WizardState(current_step_id=step_id, form_data=data)


def test_registry_has_all_flows():
    assert set(FLOWS) == {
        "booking",
        "owner_lead",
        "agent_onboarding",
        "maintenance",
        "vendor_registration",
        "visit",
    }


# ------------------------------------------------------------
# booking
# ------------------------------------------------------------

def booking_data(**overrides):
    prop = {"id": "prop-1", "rent_amount": 20000, "deposit_amount": 40000}
    data = booking.initial_data(PROFILE, {"property": prop})
    data.update(overrides)
    return data


def test_booking_prefill_from_profile():
    data = booking_data()
    assert data["name"] == "Asha Rao"
    assert data["email"] == "asha@example.com"
    assert data["phone"] == "9876543210"
    assert data["payment_method"] == "upi"
    assert data["move_in_date"] is None


def test_prefilled_country_code_phone_keeps_national_number():
    assert vendor_registration.initial_data(PROFILE, {})["phone"] == "9876543210"

    data = booking_data(move_in_date=TOMORROW)
    row = terminal_actions.booking_row(data, "user-1", {"id": "prop-1", "owner_id": "owner-1"})
    assert row["tenant_phone"] == "9876543210"


def test_booking_without_move_in_date_cannot_leave_details():
    wizard = Wizard(booking.STEPS, initial_data=booking_data(phone="9876543210"))

    wizard.advance()
    assert wizard.state.current_step_id == "details"
    assert wizard.validation().field_errors["move_in_date"] == "Please select a future date"
    assert wizard.validation().message == "Please fill in all required fields"

    wizard.update_field("move_in_date", TOMORROW)
    wizard.advance()
    assert wizard.state.current_step_id == "agreement"


def test_booking_agreement_gate():
    state = at(booking.STEPS, "agreement", booking_data(agreement_accepted=False))
    assert validate_step(state, booking.STEPS).message == "Please accept the rental agreement to continue"
    state = at(booking.STEPS, "agreement", booking_data(agreement_accepted=True))
    assert can_advance(state, booking.STEPS)


def test_booking_payment_method_must_be_known():
    assert can_advance(at(booking.STEPS, "payment", {"payment_method": "card"}), booking.STEPS)
    assert not can_advance(at(booking.STEPS, "payment", {"payment_method": "cash"}), booking.STEPS)


# ------------------------------------------------------------
# owner_lead
# ------------------------------------------------------------

def test_owner_lead_defaults_and_property_gate():
    data = owner_lead.initial_data(PROFILE, {})
    assert data["property_type"] == "2bhk"
    assert data["bedrooms"] == 2

    state = at(owner_lead.STEPS, "property", data)
    result = validate_step(state, owner_lead.STEPS)
    assert result.field_errors["property_address"] == "Please enter a complete address"
    assert result.field_errors["expected_rent"] == "Please enter expected rent"

    data.update(property_address="12 MG Road", property_locality="HSR", expected_rent=18000)
    assert can_advance(at(owner_lead.STEPS, "property", data), owner_lead.STEPS)


def test_owner_lead_owner_step_email_optional():
    data = {"owner_name": "Ravi", "owner_phone": "9876543210", "owner_email": ""}
    assert can_advance(at(owner_lead.STEPS, "owner", data), owner_lead.STEPS)
    data["owner_email"] = "bad"
    assert not can_advance(at(owner_lead.STEPS, "owner", data), owner_lead.STEPS)


# ------------------------------------------------------------
# agent_onboarding
# ------------------------------------------------------------

LEAD = {"id": "lead-1", "expected_rent": 18000, "property_type": "1bhk", "bedrooms": 1}


def test_onboarding_defaults_from_lead():
    data = agent_onboarding.initial_data(None, {"lead": LEAD})
    assert data["rent_amount"] == 18000
    assert data["deposit_amount"] == 36000
    assert data["property_type"] == "1bhk"
    assert len(data["checklist"]) == 8


def test_onboarding_defaults_without_expected_rent():
    data = agent_onboarding.initial_data(None, {"lead": {"id": "lead-2"}})
    assert data["rent_amount"] == 15000
    assert data["deposit_amount"] == 30000


def test_onboarding_visit_needs_two_photos():
    data = agent_onboarding.initial_data(None, {"lead": LEAD})
    data["live_photos"] = ["https://img/1.jpg"]
    assert not can_advance(at(agent_onboarding.STEPS, "visit", data), agent_onboarding.STEPS)
    data["live_photos"].append("https://img/2.jpg")
    assert can_advance(at(agent_onboarding.STEPS, "visit", data), agent_onboarding.STEPS)


def test_onboarding_review_needs_six_checked_items():
    data = agent_onboarding.initial_data(None, {"lead": LEAD})
    for item in data["checklist"][:5]:
        item["checked"] = True

    result = validate_step(at(agent_onboarding.STEPS, "review", data), agent_onboarding.STEPS)
    assert result.message == "Please complete at least 6 verification items"

    data["checklist"][5]["checked"] = True
    assert can_advance(at(agent_onboarding.STEPS, "review", data), agent_onboarding.STEPS)


# ------------------------------------------------------------
# maintenance
# ------------------------------------------------------------

def test_maintenance_subcategory_must_belong_to_category():
    data = {"category": "plumbing", "subcategory": "Power outage"}
    assert not can_advance(at(maintenance.STEPS, "category", data), maintenance.STEPS)
    data["subcategory"] = "Leaking tap"
    assert can_advance(at(maintenance.STEPS, "category", data), maintenance.STEPS)


def test_maintenance_details_gate_and_default_priority():
    data = maintenance.initial_data(PROFILE, {"property": None})
    assert data["priority"] == "medium"

    data.update(title="Tap leaking", description="Kitchen tap drips all night", contact_phone="98765 43210")
    assert can_advance(at(maintenance.STEPS, "details", data), maintenance.STEPS)


# ------------------------------------------------------------
# vendor_registration
# ------------------------------------------------------------

def test_vendor_with_no_categories_cannot_leave_categories_step():
    data = vendor_registration.initial_data(PROFILE, {})
    data["service_areas"] = "HSR Layout, Koramangala"

    state = at(vendor_registration.STEPS, "categories", data)
    result = validate_step(state, vendor_registration.STEPS)
    assert not result.valid
    assert result.field_errors["categories"] == "Select at least one category"

    data["categories"] = ["repair"]
    assert can_advance(at(vendor_registration.STEPS, "categories", data), vendor_registration.STEPS)


def test_vendor_unknown_category_rejected():
    data = {"categories": ["spaceships"], "service_areas": "HSR"}
    assert not can_advance(at(vendor_registration.STEPS, "categories", data), vendor_registration.STEPS)


def test_vendor_mobile_step_requires_ten_digits():
    assert not can_advance(at(vendor_registration.STEPS, "mobile", {"phone": "98765"}), vendor_registration.STEPS)
    assert can_advance(at(vendor_registration.STEPS, "mobile", {"phone": "9876543210"}), vendor_registration.STEPS)


# ------------------------------------------------------------
# visit
# ------------------------------------------------------------

def test_visit_dates_limited_to_booking_window():
    today = date(2026, 3, 10)
    steps = visit.build_steps(today=lambda: today)

    assert can_advance(at(steps, "date", {"visit_date": "2026-03-24"}), steps)
    assert not can_advance(at(steps, "date", {"visit_date": "2026-03-25"}), steps)
    assert not can_advance(at(steps, "date", {"visit_date": "2026-03-10"}), steps)


def test_visit_weekend_slots_are_limited():
    saturday = date(2026, 3, 14)
    monday = date(2026, 3, 16)

    assert visit.available_times(saturday) == ["11:00 AM", "12:00 PM", "02:00 PM", "03:00 PM", "04:00 PM"]
    assert visit.available_times(monday) == visit.TIME_SLOTS

    steps = visit.STEPS
    assert not can_advance(at(steps, "time", {"visit_date": "2026-03-14", "visit_time": "09:00 AM"}), steps)
    assert can_advance(at(steps, "time", {"visit_date": "2026-03-16", "visit_time": "09:00 AM"}), steps)


@pytest.mark.parametrize("flow", list(FLOWS.values()), ids=lambda f: f.name)
def test_every_flow_has_ordered_steps(flow):
    assert len(flow.steps) >= 3
    assert [s.order for s in flow.steps] == list(range(len(flow.steps)))
