# flows/booking.py

"""Tenant books a property: details → agreement → payment."""

from core import validators as v
from core.wizard import define_steps
from flows.base import FlowDefinition, load_property, prefill, property_summary
from services import terminal_actions


PAYMENT_METHODS = ["upi", "card", "netbanking"]

STEPS = define_steps(
    ("details", "Details", v.step_rule(
        v.required("name", "Full name"),
        v.required("email", "Email"),
        v.email("email"),
        v.phone("phone"),
        v.future_date("move_in_date"),
        message="Please fill in all required fields",
    )),
    ("agreement", "Agreement", v.step_rule(
        v.accepted("agreement_accepted", "Please accept the rental agreement to continue"),
    )),
    ("payment", "Payment", v.step_rule(
        v.one_of("payment_method", PAYMENT_METHODS, "Choose a payment method"),
    )),
)


def load_context(user, params: dict) -> dict:
    return {"property": load_property(params.get("property_id"))}


def initial_data(profile, context: dict) -> dict:
    data = prefill(profile, name="full_name", email="email", phone="phone")
    data["phone"] = v.normalize_phone(data["phone"])
    data.update({
        "occupation": "",
        "emergency_contact": "",
        "move_in_date": None,
        "agreement_accepted": False,
        "payment_method": "upi",
    })
    return data


def options(context: dict) -> dict:
    return {
        "property": property_summary(context["property"]),
        "payment_methods": PAYMENT_METHODS,
    }


def action(user, context: dict):
    return terminal_actions.create_booking(user.id, context["property"])


FLOW = FlowDefinition(
    "booking",
    STEPS,
    initial_data=initial_data,
    action=action,
    load_context=load_context,
    options=options,
)
