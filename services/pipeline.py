# services/pipeline.py

"""Status changes for bookings (owner side) and owner leads (agent side)."""

from datetime import datetime, timezone
from typing import Optional

from models.booking import BookingStatusUpdate, LeadStatusUpdate
from models.enums import LeadStatus


def booking_status_changes(update: BookingStatusUpdate) -> dict:
    data = {"status": update.status}
    if update.notes:
        if update.status == "rejected":
            data["rejection_reason"] = update.notes
        else:
            data["owner_notes"] = update.notes
    return data


def lead_status_changes(lead: dict, update: LeadStatusUpdate, now: Optional[datetime] = None) -> dict:
    """
    Column changes for a lead status move. Each pipeline stage stamps
    its own timestamp; "contacted" also counts the attempt.
    """
    now = (now or datetime.now(timezone.utc)).isoformat()
    status = update.status
    data = {"status": status.value}

    if status == LeadStatus.contacted:
        data["last_contact_at"] = now
        data["contact_attempts"] = (lead.get("contact_attempts") or 0) + 1
    elif status == LeadStatus.visit_scheduled and update.visit_scheduled_at:
        data["visit_scheduled_at"] = update.visit_scheduled_at.isoformat()
    elif status == LeadStatus.visit_completed:
        data["visit_completed_at"] = now
    elif status == LeadStatus.onboarded:
        data["onboarded_at"] = now
    elif status == LeadStatus.rejected and update.rejection_reason:
        data["rejection_reason"] = update.rejection_reason

    return data
