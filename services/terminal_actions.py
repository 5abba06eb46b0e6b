# services/terminal_actions.py

"""
Terminal actions: the one write each wizard performs on submit.

Every adapter maps the accumulated form data to the exact column names of
its Supabase table and returns an ActionResult. Supabase / network errors
never escape this module: they are logged with their raw detail and turned
into a short retry message for the user.
"""

from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.errors import GENERIC_FAILURE_MESSAGE, extract_supabase_error
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import drop_none, sanitize, split_list_field, utc_now_iso
from core.validators import format_date, normalize_phone
from core.wizard import ActionResult, TerminalAction
from models.enums import (
    CommissionStatus,
    CommissionType,
    LeadStatus,
    NotificationType,
    VisitStatus,
)


logger = get_logger("actions")


# ============================================================
# Row mappers (pure)
# ============================================================

def booking_row(form: dict, tenant_id: str, prop: dict) -> dict:
    rent = prop.get("rent_amount") or 0
    deposit = prop.get("deposit_amount") or 0
    return {
        "property_id": prop["id"],
        "owner_id": prop.get("owner_id"),
        "tenant_id": tenant_id,
        "move_in_date": format_date(form.get("move_in_date")),
        "rent_amount": rent,
        "deposit_amount": deposit,
        "tenant_name": form.get("name"),
        "tenant_email": form.get("email"),
        "tenant_phone": normalize_phone(form.get("phone")),
        "tenant_occupation": form.get("occupation") or None,
        "emergency_contact": form.get("emergency_contact") or None,
        "agreement_accepted": True,
        "agreement_accepted_at": utc_now_iso(),
        # Collected by the payment gateway, not here
        "payment_status": "pending",
        "payment_amount": rent + deposit,
    }


def owner_lead_row(form: dict, owner_id: str) -> dict:
    return {
        "owner_id": owner_id,
        "owner_name": form.get("owner_name"),
        "owner_phone": normalize_phone(form.get("owner_phone")),
        "owner_email": form.get("owner_email") or None,
        "property_address": form.get("property_address"),
        "property_locality": form.get("property_locality"),
        "property_type": form.get("property_type"),
        "bedrooms": int(form.get("bedrooms") or 0),
        "expected_rent": float(form.get("expected_rent") or 0),
        "notes": form.get("notes") or None,
    }


def onboarding_lead_update(form: dict, agent_id: str) -> dict:
    return {
        "status": LeadStatus.onboarded.value,
        "onboarded_at": utc_now_iso(),
        "agent_id": agent_id,
        "agent_notes": form.get("notes") or None,
        "property_type": form.get("property_type"),
        "bedrooms": form.get("bedrooms"),
        "expected_rent": form.get("rent_amount"),
        "images": form.get("live_photos") or None,
    }


def onboarding_commission_row(form: dict, agent_id: str, lead: dict, percentage: float) -> dict:
    base_amount = float(form.get("rent_amount") or 0)
    return {
        "agent_id": agent_id,
        "lead_id": lead["id"],
        "commission_type": CommissionType.owner_onboarding.value,
        "base_amount": base_amount,
        "percentage": percentage,
        "commission_amount": round(base_amount * percentage / 100, 2),
        "status": CommissionStatus.pending.value,
        "description": f"Owner onboarding: {lead.get('property_locality') or lead['id']}",
    }


def maintenance_ticket_row(form: dict, tenant_id: str, property_id: Optional[str]) -> dict:
    return {
        "tenant_id": tenant_id,
        "property_id": property_id,
        "category": form.get("category"),
        "subcategory": form.get("subcategory"),
        "priority": form.get("priority") or "medium",
        "title": form.get("title"),
        "description": form.get("description"),
        "photos": form.get("photos") or [],
        "preferred_date": format_date(form.get("preferred_date")),
        "preferred_time": form.get("preferred_time") or None,
        "contact_phone": normalize_phone(form.get("contact_phone")),
        "status": "open",
    }


def vendor_profile_row(form: dict, user_id: str) -> dict:
    return {
        "user_id": user_id,
        "business_name": form.get("business_name"),
        "service_types": list(form.get("categories") or []),
        "service_areas": split_list_field(form.get("service_areas")),
    }


def visit_row(form: dict, tenant_id: str, property_id: str) -> dict:
    return {
        "property_id": property_id,
        "tenant_id": tenant_id,
        "agent_id": form.get("agent_id"),
        "scheduled_date": format_date(form.get("visit_date")),
        "scheduled_time": form.get("visit_time"),
        "notes": form.get("notes") or None,
        "status": VisitStatus.pending.value,
    }


# ============================================================
# Supabase writes
# ============================================================

def _client():
    client = get_supabase_client()
    if client is None:
        raise RuntimeError("Supabase client not configured")
    return client


def _insert(table: str, row: dict) -> Optional[dict]:
    result = (
        _client()
        .table(table)
        .insert(drop_none(sanitize(row)), returning="representation")
        .execute()
    )
    return result.data[0] if result.data else None


def _update(table: str, row_id: str, data: dict) -> Optional[dict]:
    result = (
        _client()
        .table(table)
        .update(drop_none(sanitize(data)), returning="representation")
        .eq("id", row_id)
        .execute()
    )
    return result.data[0] if result.data else None


def _upsert(table: str, row: dict, on_conflict: str) -> Optional[dict]:
    result = (
        _client()
        .table(table)
        .upsert(sanitize(row), on_conflict=on_conflict, returning="representation")
        .execute()
    )
    return result.data[0] if result.data else None


def notify(user_id: Optional[str], kind: NotificationType, title: str, message: str, data: dict = None):
    """
    Create an in-app notification via the create_notification function.
    Best effort: a failed notification never fails the action that caused it.
    """
    if not user_id:
        return
    try:
        _client().rpc("create_notification", {
            "p_user_id": user_id,
            "p_type": kind.value,
            "p_title": title,
            "p_message": message,
            "p_data": data or {},
        }).execute()
    except Exception as e:
        logger.warning(f"Notification to {user_id} failed: {extract_supabase_error(e)}")


async def run_action(operation: str, write: Callable[[], Optional[dict]], failure_message: str) -> ActionResult:
    """
    Run a blocking Supabase write in the threadpool and wrap the outcome.
    A write that returns no row is treated as a malformed response.
    """
    try:
        row = await run_in_threadpool(write)
    except Exception as e:
        logger.error(f"{operation} failed: {extract_supabase_error(e)}")
        return ActionResult.failure(failure_message)

    if not row:
        logger.error(f"{operation}: no row returned")
        return ActionResult.failure(GENERIC_FAILURE_MESSAGE)

    logger.info(f"{operation}: {row.get('id', '?')}")
    return ActionResult.success(row)


# ============================================================
# Adapters, one per flow
# ============================================================

def create_booking(tenant_id: str, prop: dict) -> TerminalAction:
    async def action(form: dict) -> ActionResult:
        def write():
            booking = _insert("bookings", booking_row(form, tenant_id, prop))
            if booking:
                notify(
                    prop.get("owner_id"),
                    NotificationType.booking,
                    "New booking request",
                    f"{form.get('name')} wants to move into {prop.get('title') or 'your property'}",
                    {"booking_id": booking.get("id"), "property_id": prop["id"]},
                )
            return booking

        return await run_action("Create booking", write, "Booking failed. Please try again.")

    return action


def create_owner_lead(owner_id: str) -> TerminalAction:
    async def action(form: dict) -> ActionResult:
        def write():
            lead = _insert("owner_leads", owner_lead_row(form, owner_id))
            if lead:
                notify(
                    owner_id,
                    NotificationType.lead,
                    "Registration received",
                    "An agent will contact you within 24 hours.",
                    {"lead_id": lead.get("id")},
                )
            return lead

        return await run_action("Create owner lead", write, "Failed to submit. Please try again.")

    return action


def complete_owner_onboarding(agent_id: str, lead: dict) -> TerminalAction:
    percentage = settings.AGENT_ONBOARDING_COMMISSION_PERCENT

    async def action(form: dict) -> ActionResult:
        def write():
            updated = _update("owner_leads", lead["id"], onboarding_lead_update(form, agent_id))
            if not updated:
                return None
            try:
                commission = _insert(
                    "agent_commissions",
                    onboarding_commission_row(form, agent_id, lead, percentage),
                )
            except Exception:
                logger.error(f"Lead {lead['id']} already onboarded but commission insert failed")
                raise
            if not commission:
                # Retrying the submit re-applies the lead update and inserts the commission
                logger.error(f"Lead {lead['id']} already onboarded but no commission row returned")
                return None
            return {**updated, "commission": commission}

        return await run_action("Owner onboarding", write, "Onboarding failed. Please try again.")

    return action


def create_maintenance_ticket(tenant_id: str, property_id: Optional[str]) -> TerminalAction:
    async def action(form: dict) -> ActionResult:
        return await run_action(
            "Create maintenance ticket",
            lambda: _insert("maintenance_tickets", maintenance_ticket_row(form, tenant_id, property_id)),
            "Failed to submit request. Please try again.",
        )

    return action


def register_vendor(user_id: str) -> TerminalAction:
    async def action(form: dict) -> ActionResult:
        return await run_action(
            "Register vendor",
            lambda: _upsert("vendor_profiles", vendor_profile_row(form, user_id), on_conflict="user_id"),
            "Registration failed. Please try again.",
        )

    return action


def schedule_visit(tenant_id: str, prop: dict) -> TerminalAction:
    async def action(form: dict) -> ActionResult:
        def write():
            visit = _insert("visits", visit_row(form, tenant_id, prop["id"]))
            if visit:
                notify(
                    form.get("agent_id"),
                    NotificationType.visit,
                    "Visit scheduled",
                    f"Visit at {prop.get('title') or 'a property'} on "
                    f"{format_date(form.get('visit_date'))} {form.get('visit_time')}",
                    {"visit_id": visit.get("id"), "property_id": prop["id"]},
                )
            return visit

        return await run_action("Schedule visit", write, "Could not schedule the visit. Please try again.")

    return action
