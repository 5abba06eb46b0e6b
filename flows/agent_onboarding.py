# flows/agent_onboarding.py

"""
Agent onboards an owner lead: verify owner → property → visit photos → checklist.
Completing it marks the lead onboarded and books the onboarding commission.
"""

from fastapi import HTTPException

from core import validators as v
from core.supabase_helpers import safe_select
from core.wizard import define_steps
from flows.base import FlowDefinition
from models.enums import Furnishing, LeadStatus, PropertyType, Role
from services import terminal_actions


AMENITIES = [
    "Power Backup", "Lift", "Security", "Parking", "Gym",
    "Swimming Pool", "Garden", "Clubhouse", "CCTV", "Water Supply 24x7",
]

VERIFICATION_CHECKLIST = [
    "Owner identity verified with valid ID",
    "Property ownership documents verified",
    "All rooms and amenities inspected",
    "Photos match actual property condition",
    "No pending legal issues with property",
    "Rent and deposit agreed with owner",
    "Move-in date flexibility confirmed",
    "Emergency contact collected",
]

ID_TYPES = ["aadhaar", "pan", "passport", "voter_id", "driving_license"]

MIN_PHOTOS = 2
MIN_CHECKED_ITEMS = 6

DEFAULT_RENT = 15000


def _is_checked(entry) -> bool:
    return isinstance(entry, dict) and entry.get("checked") is True


STEPS = define_steps(
    ("owner", "Owner", v.step_rule(
        v.accepted("owner_verified", "Confirm the owner has been verified"),
        v.required("id_type", "ID type"),
        v.required("id_number", "ID number"),
    )),
    ("property", "Property", v.step_rule(
        v.positive("rent_amount", "Enter the monthly rent"),
        v.positive("deposit_amount", "Enter the deposit amount"),
    )),
    ("visit", "Visit", v.step_rule(
        v.min_count("live_photos", MIN_PHOTOS, f"Please add at least {MIN_PHOTOS} photos"),
    )),
    ("review", "Review", v.step_rule(
        v.min_count(
            "checklist",
            MIN_CHECKED_ITEMS,
            f"Please complete at least {MIN_CHECKED_ITEMS} verification items",
            predicate=_is_checked,
        ),
    )),
)


def load_context(user, params: dict) -> dict:
    lead_id = params.get("lead_id")
    if not lead_id:
        raise HTTPException(400, "lead_id is required")

    lead = safe_select("owner_leads", {"id": lead_id}, single=True)
    if not lead:
        raise HTTPException(404, f"Lead {lead_id} not found")

    if lead.get("agent_id") not in (None, user.id):
        raise HTTPException(403, "This lead is assigned to another agent")

    if lead.get("status") == LeadStatus.onboarded.value:
        raise HTTPException(409, "Lead already onboarded")

    return {"lead": lead}


def initial_data(profile, context: dict) -> dict:
    lead = context["lead"]
    rent = lead.get("expected_rent") or DEFAULT_RENT
    return {
        "owner_verified": False,
        "id_type": "",
        "id_number": "",
        "ownership_proof": "",
        "property_type": lead.get("property_type") or PropertyType.bhk2.value,
        "bedrooms": lead.get("bedrooms") or 2,
        "bathrooms": 1,
        "furnishing": Furnishing.semi_furnished.value,
        "rent_amount": rent,
        "deposit_amount": rent * 2,
        "amenities": [],
        "visit_date": None,
        "visit_time": "10:00",
        "live_photos": [],
        "property_condition": "good",
        "checklist": [{"item": item, "checked": False} for item in VERIFICATION_CHECKLIST],
        "notes": "",
    }


def options(context: dict) -> dict:
    lead = context["lead"]
    return {
        "lead": {
            "id": lead.get("id"),
            "owner_name": lead.get("owner_name"),
            "owner_phone": lead.get("owner_phone"),
            "property_address": lead.get("property_address"),
            "property_locality": lead.get("property_locality"),
        },
        "amenities": AMENITIES,
        "id_types": ID_TYPES,
        "furnishing": Furnishing.list(),
        "property_types": PropertyType.list(),
    }


def action(user, context: dict):
    return terminal_actions.complete_owner_onboarding(user.id, context["lead"])


FLOW = FlowDefinition(
    "agent_onboarding",
    STEPS,
    initial_data=initial_data,
    action=action,
    load_context=load_context,
    options=options,
    roles=[Role.agent],
)
