# tests/test_profiles.py

"""
Tests for role-record aggregation: role resolution, profile loading as
a tagged union, partial saves and role selection.
"""

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from core.errors import ProfileIncomplete, ProfileNotFound, RoleAlreadyAssigned, RoleNotAssigned
from core.utils import join_list_field, split_list_field
from models.enums import Role
from models.profile import (
    AdminProfile,
    AgentExt,
    AgentProfile,
    BaseProfileUpdate,
    TenantProfile,
    VendorProfile,
)
from services import profiles


USER = "user-1"


# ------------------------------------------------------------
# List fields
# ------------------------------------------------------------

def test_split_trims_and_keeps_duplicates_and_empties():
    assert split_list_field(" HSR , Koramangala,HSR,, ") == ["HSR", "Koramangala", "HSR", "", ""]


def test_split_empty_text_is_none():
    assert split_list_field("") is None
    assert split_list_field(None) is None


def test_split_join_round_trip_normalizes_whitespace():
    text = "HSR ,  Koramangala,Indiranagar"
    assert join_list_field(split_list_field(text)) == "HSR, Koramangala, Indiranagar"
    assert split_list_field(join_list_field(split_list_field(text))) == split_list_field(text)


def test_join_empty():
    assert join_list_field([]) == ""
    assert join_list_field(None) == ""


# ------------------------------------------------------------
# Reads
# ------------------------------------------------------------

def test_resolve_role_without_row_raises(fake_db):
    with pytest.raises(RoleNotAssigned):
        profiles.resolve_role(USER)


def test_resolve_role(fake_db):
    fake_db.seed("user_roles", {"user_id": USER, "role": "owner"})
    assert profiles.resolve_role(USER) == Role.owner


def test_fetch_base_profile_missing(fake_db):
    with pytest.raises(ProfileNotFound):
        profiles.fetch_base_profile(USER)


def test_fetch_extension_missing_raises_incomplete(fake_db):
    with pytest.raises(ProfileIncomplete):
        profiles.fetch_extension(USER, Role.agent)


def test_agent_without_extension_row_gets_defaults(fake_db, seed_user):
    seed_user("agent")

    profile = profiles.load_profile(USER)

    assert isinstance(profile, AgentProfile)
    assert profile.extension == AgentExt()
    assert profile.extension.assigned_areas == []
    assert profile.extension.completed_verifications == 0
    assert profile.extension.rating == 0
    assert profile.extension_provisioned is False


def test_load_profile_reads_exactly_one_extension(fake_db, seed_user):
    seed_user("vendor", {"business_name": "FixIt", "service_types": ["repair"], "rating": 4.2, "total_jobs": None})

    profile = profiles.load_profile(USER)

    assert isinstance(profile, VendorProfile)
    assert profile.extension.business_name == "FixIt"
    assert profile.extension.total_jobs == 0
    assert profile.extension_provisioned
    ext_reads = [t for t, op, _ in fake_db.calls if t.endswith("_profiles") and op == "select"]
    assert ext_reads == ["vendor_profiles"]


def test_admin_profile_has_no_extension(fake_db, seed_user):
    seed_user("admin")

    profile = profiles.load_profile(USER)

    assert isinstance(profile, AdminProfile)
    assert not hasattr(profile, "extension")


def test_tenant_display_and_summary(fake_db, seed_user):
    seed_user("tenant", {"emergency_contact": "Ravi 9876543210", "wallet_balance": 1500})

    profile = profiles.load_profile(USER)

    assert isinstance(profile, TenantProfile)
    assert profile.summary()["wallet_balance"] == 1500
    assert profile.display_fields() == {"emergency_contact": "Ravi 9876543210"}


# ------------------------------------------------------------
# Writes
# ------------------------------------------------------------

def test_save_base_fields_only_writes_provided_fields(fake_db, seed_user):
    profiles.save_base_fields(USER, BaseProfileUpdate(phone="9876543210"))

    _, op, payload = fake_db.calls[-1]
    assert op == "update"
    assert set(payload) == {"phone", "updated_at"}
    stored = fake_db.rows("profiles")[0]
    assert stored["full_name"] == "Asha Rao"
    assert stored["phone"] == "9876543210"


def test_base_update_rejects_email():
    with pytest.raises(ValidationError):
        BaseProfileUpdate(email="new@example.com")


def test_save_extension_splits_list_fields_and_creates_row(fake_db, seed_user):
    seed_user("agent")

    profiles.save_extension_fields(USER, Role.agent, {"assigned_areas": "HSR, Koramangala, HSR"})

    row = fake_db.rows("agent_profiles")[0]
    assert row["user_id"] == USER
    assert row["assigned_areas"] == ["HSR", "Koramangala", "HSR"]
    assert profiles.load_profile(USER).extension_provisioned


def test_save_extension_empty_text_stores_null(fake_db, seed_user):
    seed_user("technician", {"specializations": ["AC"]})

    profiles.save_extension_fields(USER, Role.technician, {"specializations": ""})

    assert fake_db.rows("technician_profiles")[0]["specializations"] is None


def test_save_extension_for_admin_rejected(fake_db):
    with pytest.raises(HTTPException) as exc:
        profiles.save_extension_fields(USER, Role.admin, {"anything": 1})
    assert exc.value.status_code == 400


def test_select_role_records_role_and_provisions_extension(fake_db, seed_user):
    profile = profiles.select_role(USER, Role.owner)

    assert fake_db.rows("user_roles") == [{"id": fake_db.rows("user_roles")[0]["id"], "user_id": USER, "role": "owner"}]
    assert fake_db.rows("owner_profiles")[0]["user_id"] == USER
    assert profile.role == "owner"
    assert profile.extension_provisioned


def test_select_role_twice_rejected(fake_db, seed_user):
    seed_user("tenant")
    with pytest.raises(RoleAlreadyAssigned):
        profiles.select_role(USER, Role.owner)


def test_admin_cannot_be_self_selected(fake_db, seed_user):
    with pytest.raises(HTTPException) as exc:
        profiles.select_role(USER, Role.admin)
    assert exc.value.status_code == 403
    assert fake_db.rows("user_roles") == []
