# flows/base.py

from typing import Callable, Dict, List, Optional

from fastapi import HTTPException

from core.supabase_helpers import safe_select
from core.wizard import Steps, TerminalAction
from dependencies.auth import CurrentUser
from models.enums import Role
from models.profile import BaseProfile


ContextLoader = Callable[[CurrentUser, dict], dict]
InitialData = Callable[[Optional[BaseProfile], dict], dict]
ActionFactory = Callable[[CurrentUser, dict], TerminalAction]
OptionsBuilder = Callable[[dict], dict]


class FlowDefinition:
    """
    Everything a screen supplies to the wizard engine:
    step table, pre-fill, context loading, terminal action.
    """

    def __init__(
        self,
        name: str,
        steps: Steps,
        *,
        initial_data: InitialData,
        action: ActionFactory,
        load_context: Optional[ContextLoader] = None,
        options: Optional[OptionsBuilder] = None,
        roles: Optional[List[Role]] = None,
    ):
        self.name = name
        self.steps = steps
        self.initial_data = initial_data
        self.action = action
        self.load_context = load_context or (lambda user, params: {})
        self.options = options or (lambda context: {})
        self.roles = roles

    def __repr__(self) -> str:
        return f"FlowDefinition({self.name!r}, steps={[s.id for s in self.steps]})"


# -------------------------------------------------------------
# Shared context loaders
# -------------------------------------------------------------
def load_property(property_id: Optional[str]) -> dict:
    if not property_id:
        raise HTTPException(400, "property_id is required")

    prop = safe_select("properties", {"id": property_id}, single=True)
    if not prop:
        raise HTTPException(404, f"Property {property_id} not found")
    return prop


def property_summary(prop: dict) -> Dict[str, object]:
    rent = prop.get("rent_amount") or 0
    deposit = prop.get("deposit_amount") or 0
    return {
        "id": prop.get("id"),
        "title": prop.get("title"),
        "address": prop.get("address"),
        "locality": prop.get("locality"),
        "rent_amount": rent,
        "deposit_amount": deposit,
        "total_payable": rent + deposit,
    }


def prefill(profile: Optional[BaseProfile], **mapping: str) -> dict:
    """
    Pre-fill form fields from the user's base profile.
    prefill(profile, name="full_name") → {"name": profile.full_name or ""}
    """
    data = {}
    for field, attr in mapping.items():
        value = getattr(profile, attr, None) if profile else None
        data[field] = value or ""
    return data
