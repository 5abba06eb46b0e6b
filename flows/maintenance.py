# flows/maintenance.py

"""Tenant raises a maintenance ticket: category → details → photos → confirm."""

from core import validators as v
from core.supabase_helpers import safe_select
from core.wizard import define_steps
from flows.base import FlowDefinition, prefill
from models.enums import TicketPriority
from services import terminal_actions


CATEGORIES = {
    "plumbing": ("Plumbing", ["Leaking tap", "Clogged drain", "Low water pressure", "Toilet issues", "Pipe burst", "Other"]),
    "electrical": ("Electrical", ["Power outage", "Faulty switch", "Flickering lights", "Short circuit", "Wiring issue", "Other"]),
    "hvac": ("AC/Heating", ["AC not cooling", "Heating not working", "Strange noise", "Gas smell", "Thermostat issue", "Other"]),
    "appliances": ("Appliances", ["Refrigerator", "Washing machine", "Geyser", "Microwave", "Chimney", "Other"]),
    "structural": ("Structural", ["Wall crack", "Ceiling leak", "Door/window", "Floor damage", "Dampness", "Other"]),
    "pest": ("Pest Control", ["Cockroaches", "Ants", "Termites", "Rodents", "Mosquitoes", "Other"]),
    "painting": ("Painting", ["Wall paint", "Ceiling paint", "Touch-up", "Full repaint", "Other"]),
    "security": ("Security", ["Door lock", "Window lock", "Intercom", "CCTV", "Other"]),
}

PRIORITIES = {
    "low": "Can wait a few days",
    "medium": "Within 48 hours",
    "high": "Within 24 hours",
    "urgent": "Immediate attention",
}


def _subcategory_matches(value, form: dict) -> bool:
    category = CATEGORIES.get(form.get("category"))
    return category is not None and value in category[1]


STEPS = define_steps(
    ("category", "Category", v.step_rule(
        v.one_of("category", list(CATEGORIES), "Choose a category"),
        v.custom("subcategory", _subcategory_matches, "Tell us what's wrong"),
    )),
    ("details", "Details", v.step_rule(
        v.required("title", "Title"),
        v.required("description", "Description"),
        v.phone("contact_phone"),
        v.one_of("priority", TicketPriority.list(), "Choose a priority"),
    )),
    ("photos", "Photos", v.always_valid),
    ("confirm", "Confirm", v.always_valid),
)


def load_context(user, params: dict) -> dict:
    property_id = params.get("property_id")
    if not property_id:
        return {"property": None}
    # Ticket can still be raised if the property lookup comes back empty
    prop = safe_select("properties", {"id": property_id}, single=True)
    return {"property": prop or {"id": property_id}}


def initial_data(profile, context: dict) -> dict:
    data = prefill(profile, contact_phone="phone")
    data["contact_phone"] = v.normalize_phone(data["contact_phone"])
    data.update({
        "category": "",
        "subcategory": "",
        "priority": TicketPriority.medium.value,
        "title": "",
        "description": "",
        "photos": [],
        "preferred_date": None,
        "preferred_time": None,
    })
    return data


def options(context: dict) -> dict:
    prop = context.get("property") or {}
    return {
        "property_title": prop.get("title"),
        "categories": [
            {"id": key, "label": label, "subcategories": subs}
            for key, (label, subs) in CATEGORIES.items()
        ],
        "priorities": [{"id": key, "description": desc} for key, desc in PRIORITIES.items()],
    }


def action(user, context: dict):
    prop = context.get("property") or {}
    return terminal_actions.create_maintenance_ticket(user.id, prop.get("id"))


FLOW = FlowDefinition(
    "maintenance",
    STEPS,
    initial_data=initial_data,
    action=action,
    load_context=load_context,
    options=options,
)
