# tests/test_terminal_actions.py

"""
Tests for terminal actions: column mapping, Supabase writes and the
conversion of failures into ActionResult.
"""

import asyncio
from unittest.mock import patch

from core.errors import GENERIC_FAILURE_MESSAGE
from services import terminal_actions as ta


PROPERTY = {
    "id": "prop-1",
    "owner_id": "owner-1",
    "title": "2BHK in HSR Layout",
    "rent_amount": 20000,
    "deposit_amount": 40000,
}

BOOKING_FORM = {
    "name": "Asha Rao",
    "email": "asha@example.com",
    "phone": "+91 98765-43210",
    "move_in_date": "2026-04-01T00:00:00",
    "occupation": "",
    "emergency_contact": "",
    "agreement_accepted": True,
    "payment_method": "upi",
}


# ------------------------------------------------------------
# Row mappers
# ------------------------------------------------------------

def test_booking_row_maps_columns():
    row = ta.booking_row(BOOKING_FORM, "tenant-1", PROPERTY)

    assert row["property_id"] == "prop-1"
    assert row["owner_id"] == "owner-1"
    assert row["tenant_id"] == "tenant-1"
    assert row["move_in_date"] == "2026-04-01"
    assert row["tenant_phone"] == "9876543210"
    assert row["tenant_occupation"] is None
    assert row["payment_amount"] == 60000
    assert row["payment_status"] == "pending"
    assert "payment_method" not in row


def test_owner_lead_row_coerces_numbers():
    row = ta.owner_lead_row({
        "owner_name": "Ravi",
        "owner_phone": "98765 43210",
        "owner_email": "",
        "property_type": "2bhk",
        "bedrooms": "3",
        "expected_rent": "18000",
    }, "owner-1")

    assert row["owner_phone"] == "9876543210"
    assert row["owner_email"] is None
    assert row["bedrooms"] == 3
    assert row["expected_rent"] == 18000.0


def test_onboarding_commission_is_percentage_of_rent():
    row = ta.onboarding_commission_row({"rent_amount": 18000}, "agent-1", {"id": "lead-1"}, 10.0)

    assert row["commission_type"] == "owner_onboarding"
    assert row["base_amount"] == 18000.0
    assert row["commission_amount"] == 1800.0
    assert row["status"] == "pending"


def test_vendor_row_splits_service_areas():
    row = ta.vendor_profile_row({
        "business_name": "FixIt",
        "categories": ["repair", "cleaning"],
        "service_areas": "HSR, Koramangala ,",
    }, "user-1")

    assert row["service_types"] == ["repair", "cleaning"]
    assert row["service_areas"] == ["HSR", "Koramangala", ""]


# ------------------------------------------------------------
# Writes
# ------------------------------------------------------------

def test_create_booking_inserts_and_notifies_owner(fake_db):
    action = ta.create_booking("tenant-1", PROPERTY)

    result = asyncio.run(action(BOOKING_FORM))

    assert result.ok
    stored = fake_db.rows("bookings")
    assert len(stored) == 1
    assert stored[0]["tenant_phone"] == "9876543210"
    # Empty optional text is not written
    assert "tenant_occupation" not in stored[0]

    name, params = fake_db.rpc_calls[0]
    assert name == "create_notification"
    assert params["p_user_id"] == "owner-1"
    assert params["p_type"] == "booking"
    assert params["p_data"]["booking_id"] == result.data["id"]


def test_create_booking_failure_returns_retry_message(fake_db):
    fake_db.fail("bookings", 'duplicate key value violates unique constraint "bookings_pkey"')
    action = ta.create_booking("tenant-1", PROPERTY)

    result = asyncio.run(action(BOOKING_FORM))

    assert not result.ok
    assert result.error == "Booking failed. Please try again."
    assert fake_db.rpc_calls == []


def test_notification_failure_does_not_fail_booking(fake_db):
    fake_db.fail("create_notification")
    action = ta.create_booking("tenant-1", PROPERTY)

    result = asyncio.run(action(BOOKING_FORM))

    assert result.ok
    assert len(fake_db.rows("bookings")) == 1


def test_create_owner_lead(fake_db):
    action = ta.create_owner_lead("owner-1")

    result = asyncio.run(action({
        "owner_name": "Ravi",
        "owner_phone": "9876543210",
        "property_address": "12 MG Road",
        "property_locality": "HSR",
        "property_type": "2bhk",
        "bedrooms": 2,
        "expected_rent": 18000,
    }))

    assert result.ok
    assert fake_db.rows("owner_leads")[0]["owner_id"] == "owner-1"


def test_complete_owner_onboarding_updates_lead_and_books_commission(fake_db):
    fake_db.seed("owner_leads", {"id": "lead-1", "status": "new", "property_locality": "HSR"})
    action = ta.complete_owner_onboarding("agent-1", {"id": "lead-1", "property_locality": "HSR"})

    result = asyncio.run(action({"rent_amount": 20000, "live_photos": ["a", "b"], "notes": "All good"}))

    assert result.ok
    lead = fake_db.rows("owner_leads")[0]
    assert lead["status"] == "onboarded"
    assert lead["agent_id"] == "agent-1"
    commission = fake_db.rows("agent_commissions")[0]
    assert commission["commission_amount"] == 2000.0
    assert result.data["commission"]["lead_id"] == "lead-1"


def test_onboarding_commission_error_fails_and_retry_books_it(fake_db):
    fake_db.seed("owner_leads", {"id": "lead-1", "status": "new"})
    fake_db.fail("agent_commissions")
    action = ta.complete_owner_onboarding("agent-1", {"id": "lead-1"})

    result = asyncio.run(action({"rent_amount": 20000}))

    assert not result.ok
    assert result.error == "Onboarding failed. Please try again."

    del fake_db.failures["agent_commissions"]
    assert asyncio.run(action({"rent_amount": 20000})).ok
    assert len(fake_db.rows("agent_commissions")) == 1


def test_onboarding_without_commission_row_is_failure(fake_db):
    fake_db.seed("owner_leads", {"id": "lead-1", "status": "new"})
    action = ta.complete_owner_onboarding("agent-1", {"id": "lead-1"})

    with patch.object(ta, "_insert", return_value=None):
        result = asyncio.run(action({"rent_amount": 20000}))

    assert not result.ok
    assert result.error == GENERIC_FAILURE_MESSAGE


def test_onboarding_missing_lead_is_generic_failure(fake_db):
    action = ta.complete_owner_onboarding("agent-1", {"id": "gone"})

    result = asyncio.run(action({"rent_amount": 20000}))

    assert not result.ok
    assert result.error == GENERIC_FAILURE_MESSAGE
    assert fake_db.rows("agent_commissions") == []


def test_register_vendor_upserts_on_user_id(fake_db):
    fake_db.seed("vendor_profiles", {"id": "vp-1", "user_id": "user-1", "rating": 4.5})
    action = ta.register_vendor("user-1")

    result = asyncio.run(action({"business_name": "FixIt", "categories": ["repair"], "service_areas": "HSR"}))

    assert result.ok
    rows = fake_db.rows("vendor_profiles")
    assert len(rows) == 1
    assert rows[0]["business_name"] == "FixIt"
    assert rows[0]["rating"] == 4.5


def test_maintenance_ticket_and_visit(fake_db):
    ticket = asyncio.run(ta.create_maintenance_ticket("tenant-1", "prop-1")({
        "category": "plumbing",
        "subcategory": "Leaking tap",
        "title": "Tap",
        "description": "Drips",
        "contact_phone": "98765-43210",
    }))
    visit = asyncio.run(ta.schedule_visit("tenant-1", PROPERTY)({
        "visit_date": "2026-04-02",
        "visit_time": "11:00 AM",
        "agent_id": "agent-1",
    }))

    assert ticket.ok and visit.ok
    assert fake_db.rows("maintenance_tickets")[0]["priority"] == "medium"
    assert fake_db.rows("visits")[0]["scheduled_date"] == "2026-04-02"
    assert fake_db.rpc_calls[0][1]["p_user_id"] == "agent-1"


def test_unconfigured_client_is_failure():
    from unittest.mock import patch

    with patch("services.terminal_actions.get_supabase_client", return_value=None):
        result = asyncio.run(ta.create_owner_lead("owner-1")({"owner_name": "Ravi"}))

    assert not result.ok
