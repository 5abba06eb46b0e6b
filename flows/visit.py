# flows/visit.py

"""Tenant schedules a property visit: date → time → agent → details → confirm."""

from datetime import date, timedelta
from typing import Callable, List

from core import validators as v
from core.supabase_helpers import safe_select
from core.wizard import define_steps
from flows.base import FlowDefinition, load_property, prefill, property_summary
from models.enums import Role
from services import terminal_actions


BOOKING_WINDOW_DAYS = 14

TIME_SLOTS = [
    "09:00 AM", "10:00 AM", "11:00 AM", "12:00 PM",
    "02:00 PM", "03:00 PM", "04:00 PM", "05:00 PM", "06:00 PM",
]

# Weekends: 11:00 AM through 04:00 PM only
WEEKEND_SLOTS = TIME_SLOTS[2:7]


def available_dates(today: date) -> List[date]:
    return [today + timedelta(days=i) for i in range(1, BOOKING_WINDOW_DAYS + 1)]


def available_times(day) -> List[str]:
    parsed = v.parse_date(day)
    if parsed is None:
        return []
    return WEEKEND_SLOTS if parsed.weekday() >= 5 else TIME_SLOTS


def _within_window(today: Callable[[], date]):
    def check(value, _):
        parsed = v.parse_date(value)
        return parsed is not None and parsed <= today() + timedelta(days=BOOKING_WINDOW_DAYS)
    return check


def _slot_available(value, form: dict) -> bool:
    return value in available_times(form.get("visit_date"))


def build_steps(today: Callable[[], date] = date.today):
    return define_steps(
        ("date", "Date", v.step_rule(
            v.future_date("visit_date", today=today),
            v.custom("visit_date", _within_window(today), f"Visits can be booked up to {BOOKING_WINDOW_DAYS} days ahead"),
        )),
        ("time", "Time", v.step_rule(
            v.custom("visit_time", _slot_available, "Please pick an available time slot"),
        )),
        ("agent", "Agent", v.step_rule(
            v.required("agent_id", "Agent"),
        )),
        ("details", "Details", v.step_rule(
            v.required("visitor_name", "Name"),
            v.phone("visitor_phone"),
            v.email("visitor_email", optional=True),
        )),
        ("confirm", "Confirm", v.always_valid),
    )


STEPS = build_steps()


def load_agents() -> List[dict]:
    """Agents a visitor can pick, with their public rating."""
    role_rows = safe_select("user_roles", {"role": Role.agent.value}, columns="user_id")
    agents = []
    for row in role_rows:
        user_id = row["user_id"]
        profile = safe_select("profiles", {"id": user_id}, single=True, columns="id, full_name, phone") or {}
        ext = safe_select("agent_profiles", {"user_id": user_id}, single=True) or {}
        agents.append({
            "id": user_id,
            "name": profile.get("full_name") or "",
            "phone": profile.get("phone"),
            "rating": ext.get("rating"),
            "completed_visits": ext.get("completed_verifications") or 0,
        })
    return agents


def load_context(user, params: dict) -> dict:
    return {
        "property": load_property(params.get("property_id")),
        "agents": load_agents(),
    }


def initial_data(profile, context: dict) -> dict:
    data = prefill(profile, visitor_name="full_name", visitor_phone="phone", visitor_email="email")
    data["visitor_phone"] = v.normalize_phone(data["visitor_phone"])
    data.update({
        "visit_date": None,
        "visit_time": None,
        "agent_id": None,
        "notes": "",
    })
    return data


def options(context: dict) -> dict:
    today = date.today()
    return {
        "property": property_summary(context["property"]),
        "dates": [
            {"date": d.isoformat(), "times": available_times(d)}
            for d in available_dates(today)
        ],
        "agents": context.get("agents", []),
    }


def action(user, context: dict):
    return terminal_actions.schedule_visit(user.id, context["property"])


FLOW = FlowDefinition(
    "visit",
    STEPS,
    initial_data=initial_data,
    action=action,
    load_context=load_context,
    options=options,
)
