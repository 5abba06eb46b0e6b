# routers/bookings.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import RoleNotAssigned
from core.logging_config import logger
from core.supabase_helpers import safe_select, safe_update
from core.utils import utc_now_iso
from dependencies.auth import CurrentUser, get_current_user, requires_role
from models.booking import BookingStatusUpdate
from models.enums import BookingStatus, NotificationType, Role
from services.pipeline import booking_status_changes
from services.profiles import resolve_role
from services.terminal_actions import notify

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"],
)


# -----------------------------------------------------
# GET /bookings
# Tenants see their own bookings, owners see bookings
# on their properties.
# -----------------------------------------------------
@router.get("", summary="List bookings for the current user")
def list_bookings(
    status: Optional[BookingStatus] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        role = resolve_role(current_user.id)
    except RoleNotAssigned:
        raise HTTPException(403, "Select a role first")

    if role == Role.owner:
        filters = {"owner_id": current_user.id}
    elif role == Role.tenant:
        filters = {"tenant_id": current_user.id}
    elif role == Role.admin:
        filters = {}
    else:
        raise HTTPException(403, f"Bookings are not available for {role.value} accounts")

    if status:
        filters["status"] = status.value

    return safe_select("bookings", filters, order_by="created_at")


# -----------------------------------------------------
# PATCH /bookings/{id}/status (property owner)
# -----------------------------------------------------
@router.patch("/{booking_id}/status", summary="Approve, reject or cancel a booking")
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    current_user: CurrentUser = Depends(requires_role([Role.owner])),
):
    booking = safe_select("bookings", {"id": booking_id}, single=True)
    if not booking:
        raise HTTPException(404, f"Booking {booking_id} not found")

    if booking.get("owner_id") != current_user.id:
        raise HTTPException(403, "Not your booking")

    changes = booking_status_changes(payload)
    changes["updated_at"] = utc_now_iso()
    updated = safe_update("bookings", {"id": booking_id}, changes)
    if not updated:
        raise HTTPException(404, f"Booking {booking_id} not found")

    notify(
        booking.get("tenant_id"),
        NotificationType.booking,
        f"Booking {payload.status}",
        f"Your booking request has been {payload.status}.",
        {"booking_id": booking_id},
    )

    logger.info(f"Booking {booking_id} → {payload.status} by {current_user.id}")
    return updated
