# flows/__init__.py

from fastapi import HTTPException

from flows import (
    agent_onboarding,
    booking,
    maintenance,
    owner_lead,
    vendor_registration,
    visit,
)
from flows.base import FlowDefinition


FLOWS = {
    flow.FLOW.name: flow.FLOW
    for flow in (
        booking,
        owner_lead,
        agent_onboarding,
        maintenance,
        vendor_registration,
        visit,
    )
}


def get_flow(name: str) -> FlowDefinition:
    flow = FLOWS.get(name)
    if flow is None:
        raise HTTPException(404, f"Unknown flow '{name}'")
    return flow
