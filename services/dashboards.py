# services/dashboards.py

"""
Role dashboards: a summary block plus the read-only rows each role
works with. Dispatch is on the RoleProfile variant.
"""

from collections import Counter
from typing import Iterable, List

from core.logging_config import get_logger
from core.supabase_helpers import safe_count, safe_select
from models.enums import BookingStatus, CommissionStatus, CommissionType, LeadStatus
from models.profile import (
    AdminProfile,
    AgentProfile,
    OwnerProfile,
    TechnicianProfile,
    TenantProfile,
    VendorProfile,
)


logger = get_logger("dashboards")


# -------------------------------------------------------------
# Aggregates (pure)
# -------------------------------------------------------------
def status_counts(rows: Iterable[dict], statuses: Iterable[str]) -> dict:
    counts = Counter(row.get("status") for row in rows)
    return {status: counts.get(status, 0) for status in statuses}


def lead_stats(leads: List[dict]) -> dict:
    stats = {"total": len(leads)}
    stats.update(status_counts(leads, LeadStatus.list()))
    return stats


def _amount(rows: Iterable[dict]) -> float:
    return round(sum(float(r.get("commission_amount") or 0) for r in rows), 2)


def commission_summary(commissions: List[dict]) -> dict:
    return {
        "total_earnings": _amount(commissions),
        "pending_amount": _amount(c for c in commissions if c.get("status") == CommissionStatus.pending.value),
        "paid_amount": _amount(c for c in commissions if c.get("status") == CommissionStatus.paid.value),
        "by_type": {
            kind: _amount(c for c in commissions if c.get("commission_type") == kind)
            for kind in CommissionType.list()
        },
    }


# -------------------------------------------------------------
# Per-role builders
# -------------------------------------------------------------
def _tenant(profile: TenantProfile) -> dict:
    user_id = profile.base.id
    bookings = safe_select("bookings", {"tenant_id": user_id}, order_by="created_at")
    visits = safe_select("visits", {"tenant_id": user_id}, order_by="scheduled_date")
    summary = {
        **profile.summary(),
        "bookings": status_counts(bookings, BookingStatus.list()),
        "upcoming_visits": sum(1 for v in visits if v.get("status") in ("pending", "confirmed")),
    }
    return {"summary": summary, "listings": {"bookings": bookings, "visits": visits}}


def _owner(profile: OwnerProfile) -> dict:
    user_id = profile.base.id
    properties = safe_select("properties", {"owner_id": user_id}, order_by="created_at")
    bookings = safe_select("bookings", {"owner_id": user_id}, order_by="created_at")
    leads = safe_select("owner_leads", {"owner_id": user_id}, order_by="created_at")
    summary = {
        **profile.summary(),
        "listings": len(properties),
        "pending_bookings": sum(1 for b in bookings if b.get("status") == BookingStatus.pending.value),
    }
    return {
        "summary": summary,
        "listings": {"properties": properties, "bookings": bookings, "leads": leads},
    }


def _agent(profile: AgentProfile) -> dict:
    user_id = profile.base.id
    leads = safe_select("owner_leads", {"agent_id": user_id}, order_by="created_at")
    commissions = safe_select("agent_commissions", {"agent_id": user_id}, order_by="created_at")
    summary = {
        **profile.summary(),
        "leads": lead_stats(leads),
        "commissions": commission_summary(commissions),
    }
    return {"summary": summary, "listings": {"leads": leads, "commissions": commissions}}


def _service_provider(profile) -> dict:
    return {"summary": profile.summary(), "listings": {}}


def _admin(profile: AdminProfile) -> dict:
    summary = {
        "profiles": safe_count("profiles"),
        "properties": safe_count("properties"),
        "bookings": safe_count("bookings"),
        "pending_properties": safe_count("properties", {"status": "pending"}),
    }
    return {"summary": summary, "listings": {}}


BUILDERS = {
    TenantProfile: _tenant,
    OwnerProfile: _owner,
    AgentProfile: _agent,
    VendorProfile: _service_provider,
    TechnicianProfile: _service_provider,
    AdminProfile: _admin,
}


def build_dashboard(profile) -> dict:
    """{profile, summary, listings} for any RoleProfile variant."""
    builder = BUILDERS[type(profile)]
    body = builder(profile)
    logger.debug(f"Dashboard built for {profile.base.id} ({profile.role})")
    return {
        "role": profile.role,
        "profile": profile.model_dump(mode="json"),
        "extension_provisioned": profile.extension_provisioned,
        **body,
    }
