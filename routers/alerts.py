# routers/alerts.py

from fastapi import APIRouter, Depends, HTTPException

from core.logging_config import logger
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_update
from core.utils import utc_now_iso
from dependencies.auth import CurrentUser, get_current_user
from models.alert import PropertyAlertCreate, PropertyAlertUpdate

router = APIRouter(
    prefix="/alerts",
    tags=["Property Alerts"],
)


# -----------------------------------------------------
# GET /alerts
# -----------------------------------------------------
@router.get("", summary="List my property alerts")
def list_alerts(current_user: CurrentUser = Depends(get_current_user)):
    return safe_select("property_alerts", {"user_id": current_user.id}, order_by="created_at")


# -----------------------------------------------------
# POST /alerts
# -----------------------------------------------------
@router.post("", summary="Create a property alert")
def create_alert(
    payload: PropertyAlertCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    row = payload.model_dump(mode="json")
    row["user_id"] = current_user.id

    created = safe_insert("property_alerts", row)
    if not created:
        raise HTTPException(500, "Failed to create alert")

    logger.info(f"Property alert {created.get('id')} created by {current_user.id}")
    return created


# -----------------------------------------------------
# PATCH /alerts/{id}
# -----------------------------------------------------
@router.patch("/{alert_id}", summary="Update a property alert")
def update_alert(
    alert_id: str,
    payload: PropertyAlertUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    changes = payload.model_dump(mode="json", exclude_unset=True)
    if not changes:
        raise HTTPException(400, "No fields to update")
    changes["updated_at"] = utc_now_iso()

    updated = safe_update("property_alerts", {"id": alert_id, "user_id": current_user.id}, changes)
    if not updated:
        raise HTTPException(404, f"Alert {alert_id} not found")
    return updated


# -----------------------------------------------------
# DELETE /alerts/{id}
# -----------------------------------------------------
@router.delete("/{alert_id}", summary="Delete a property alert")
def delete_alert(
    alert_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    if not safe_delete("property_alerts", {"id": alert_id, "user_id": current_user.id}):
        raise HTTPException(404, f"Alert {alert_id} not found")
    return {"status": "deleted", "id": alert_id}
