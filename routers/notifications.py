# routers/notifications.py

from fastapi import APIRouter, Depends, HTTPException

from core.logging_config import logger
from core.supabase_helpers import safe_delete, safe_select, safe_update
from dependencies.auth import CurrentUser, get_current_user

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)

# Inbox page size (newest first)
INBOX_LIMIT = 50


# -----------------------------------------------------
# GET /notifications
# -----------------------------------------------------
@router.get("", summary="List my notifications")
def list_notifications(current_user: CurrentUser = Depends(get_current_user)):
    notifications = safe_select(
        "notifications",
        {"user_id": current_user.id},
        order_by="created_at",
        limit=INBOX_LIMIT,
    )
    return {
        "notifications": notifications,
        "unread_count": sum(1 for n in notifications if not n.get("is_read")),
    }


# -----------------------------------------------------
# PATCH /notifications/{id}/read
# -----------------------------------------------------
@router.patch("/{notification_id}/read", summary="Mark a notification as read")
def mark_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    updated = safe_update(
        "notifications",
        {"id": notification_id, "user_id": current_user.id},
        {"is_read": True},
    )
    if not updated:
        raise HTTPException(404, f"Notification {notification_id} not found")
    return updated


# -----------------------------------------------------
# POST /notifications/read-all
# -----------------------------------------------------
@router.post("/read-all", summary="Mark all my notifications as read")
def mark_all_read(current_user: CurrentUser = Depends(get_current_user)):
    updated = safe_update(
        "notifications",
        {"user_id": current_user.id, "is_read": False},
        {"is_read": True},
        many=True,
    )
    return {"updated": len(updated)}


# -----------------------------------------------------
# DELETE /notifications/{id}
# -----------------------------------------------------
@router.delete("/{notification_id}", summary="Delete a notification")
def delete_notification(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    deleted = safe_delete("notifications", {"id": notification_id, "user_id": current_user.id})
    if not deleted:
        raise HTTPException(404, f"Notification {notification_id} not found")
    return {"status": "deleted", "id": notification_id}


# -----------------------------------------------------
# DELETE /notifications
# -----------------------------------------------------
@router.delete("", summary="Clear my notifications")
def clear_notifications(current_user: CurrentUser = Depends(get_current_user)):
    deleted = safe_delete("notifications", {"user_id": current_user.id})
    logger.info(f"Cleared {len(deleted)} notifications for {current_user.id}")
    return {"deleted": len(deleted)}
