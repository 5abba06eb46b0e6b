# flows/owner_lead.py

"""Owner registers a property for the guaranteed-rent program (creates an owner lead)."""

from core import validators as v
from core.wizard import define_steps
from flows.base import FlowDefinition, prefill
from models.enums import PropertyType
from services import terminal_actions


STEPS = define_steps(
    ("owner", "Owner", v.step_rule(
        v.min_length("owner_name", 2, "Name must be at least 2 characters"),
        v.phone("owner_phone"),
        v.email("owner_email", optional=True),
    )),
    ("property", "Property", v.step_rule(
        v.min_length("property_address", 5, "Please enter a complete address"),
        v.min_length("property_locality", 2, "Please enter the locality"),
        v.one_of("property_type", PropertyType.list(), "Please select a property type"),
        v.min_value("bedrooms", 1, "Please select number of bedrooms"),
        v.min_value("expected_rent", 1000, "Please enter expected rent"),
    )),
    ("review", "Review", v.always_valid),
)


def initial_data(profile, context: dict) -> dict:
    data = prefill(profile, owner_name="full_name", owner_phone="phone", owner_email="email")
    data["owner_phone"] = v.normalize_phone(data["owner_phone"])
    data.update({
        "property_address": "",
        "property_locality": "",
        "property_type": PropertyType.bhk2.value,
        "bedrooms": 2,
        "expected_rent": 0,
        "notes": "",
    })
    return data


def options(context: dict) -> dict:
    return {"property_types": PropertyType.list()}


def action(user, context: dict):
    return terminal_actions.create_owner_lead(user.id)


FLOW = FlowDefinition(
    "owner_lead",
    STEPS,
    initial_data=initial_data,
    action=action,
    options=options,
)
