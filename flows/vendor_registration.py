# flows/vendor_registration.py

"""Marketplace vendor sign-up: mobile → business → categories & areas → review."""

from core import validators as v
from core.wizard import define_steps
from flows.base import FlowDefinition, prefill
from services import terminal_actions


VENDOR_CATEGORIES = {
    "furniture": "Furniture",
    "electronics": "Electronics",
    "appliances": "Appliances",
    "mobility": "Mobility",
    "tools": "Tools & Equipment",
    "delivery": "Delivery & Install",
    "repair": "Repair Services",
    "cleaning": "Cleaning Services",
    "relocation": "Relocation",
}


def _known_categories(value, form: dict) -> bool:
    return all(c in VENDOR_CATEGORIES for c in value or [])


STEPS = define_steps(
    ("mobile", "Mobile Verification", v.step_rule(
        v.phone("phone"),
    )),
    ("business", "Business Details", v.step_rule(
        v.required("business_name", "Business name"),
        v.required("owner_name", "Owner name"),
        v.required("email", "Email"),
        v.email("email"),
    )),
    ("categories", "Categories & Areas", v.step_rule(
        v.non_empty("categories", "Select at least one category"),
        v.custom("categories", _known_categories, "Unknown category selected"),
        v.required("service_areas", "Service areas"),
    )),
    ("review", "Review & Submit", v.step_rule(
        v.accepted("agree_terms", "Please accept the terms to continue"),
    )),
)


def initial_data(profile, context: dict) -> dict:
    data = prefill(profile, phone="phone", owner_name="full_name", email="email")
    data["phone"] = v.normalize_phone(data["phone"])
    data.update({
        "business_name": "",
        "description": "",
        "categories": [],
        "service_areas": "",
        "agree_terms": False,
    })
    return data


def options(context: dict) -> dict:
    return {"categories": [{"id": k, "name": name} for k, name in VENDOR_CATEGORIES.items()]}


def action(user, context: dict):
    return terminal_actions.register_vendor(user.id)


FLOW = FlowDefinition(
    "vendor_registration",
    STEPS,
    initial_data=initial_data,
    action=action,
    options=options,
)
