# routers/leads.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.logging_config import logger
from core.supabase_helpers import safe_select, safe_update
from core.utils import utc_now_iso
from dependencies.auth import CurrentUser, requires_role
from models.booking import LeadNotesUpdate, LeadStatusUpdate
from models.enums import LeadStatus, Role
from services.dashboards import lead_stats
from services.pipeline import lead_status_changes

router = APIRouter(
    prefix="/leads",
    tags=["Owner Leads"],
)

agent_only = requires_role([Role.agent])


def _get_lead_for_agent(lead_id: str, agent_id: str) -> dict:
    lead = safe_select("owner_leads", {"id": lead_id}, single=True)
    if not lead:
        raise HTTPException(404, f"Lead {lead_id} not found")
    if lead.get("agent_id") not in (None, agent_id):
        raise HTTPException(403, "This lead is assigned to another agent")
    return lead


# -----------------------------------------------------
# GET /leads
# scope=mine: leads assigned to me; scope=open: new,
# unassigned leads any agent can pick up
# -----------------------------------------------------
@router.get("", summary="List owner leads")
def list_leads(
    scope: str = Query("mine", pattern="^(mine|open)$"),
    status: Optional[LeadStatus] = Query(None),
    current_user: CurrentUser = Depends(agent_only),
):
    if scope == "open":
        rows = safe_select("owner_leads", {"status": LeadStatus.new.value}, order_by="created_at")
        leads = [r for r in rows if not r.get("agent_id")]
    else:
        filters = {"agent_id": current_user.id}
        if status:
            filters["status"] = status.value
        leads = safe_select("owner_leads", filters, order_by="created_at")

    return {"leads": leads, "stats": lead_stats(leads)}


# -----------------------------------------------------
# PATCH /leads/{id}/status
# -----------------------------------------------------
@router.patch("/{lead_id}/status", summary="Move a lead through the pipeline")
def update_lead_status(
    lead_id: str,
    payload: LeadStatusUpdate,
    current_user: CurrentUser = Depends(agent_only),
):
    lead = _get_lead_for_agent(lead_id, current_user.id)

    changes = lead_status_changes(lead, payload)
    # Working an unassigned lead claims it
    changes["agent_id"] = current_user.id
    changes["updated_at"] = utc_now_iso()

    updated = safe_update("owner_leads", {"id": lead_id}, changes)
    if not updated:
        raise HTTPException(404, f"Lead {lead_id} not found")

    logger.info(f"Lead {lead_id} → {payload.status.value} by agent {current_user.id}")
    return updated


# -----------------------------------------------------
# PATCH /leads/{id}/notes
# -----------------------------------------------------
@router.patch("/{lead_id}/notes", summary="Save agent notes on a lead")
def update_lead_notes(
    lead_id: str,
    payload: LeadNotesUpdate,
    current_user: CurrentUser = Depends(agent_only),
):
    _get_lead_for_agent(lead_id, current_user.id)

    updated = safe_update(
        "owner_leads",
        {"id": lead_id},
        {"agent_notes": payload.notes, "updated_at": utc_now_iso()},
    )
    if not updated:
        raise HTTPException(404, f"Lead {lead_id} not found")
    return updated
