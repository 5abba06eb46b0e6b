# models/booking.py

from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel

from models.enums import LeadStatus


# ============================================================
# BOOKINGS (owner review)
# ============================================================
class BookingStatusUpdate(BaseModel):
    status: Literal["approved", "rejected", "cancelled"]
    # Stored as rejection_reason when rejecting, owner_notes otherwise
    notes: Optional[str] = None


# ============================================================
# OWNER LEADS (agent pipeline)
# ============================================================
class LeadStatusUpdate(BaseModel):
    status: LeadStatus
    visit_scheduled_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class LeadNotesUpdate(BaseModel):
    notes: str
