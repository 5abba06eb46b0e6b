# routers/boosts.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.logging_config import logger
from core.supabase_helpers import safe_insert, safe_select, safe_update
from dependencies.auth import CurrentUser, get_current_user, requires_role
from models.boost import BoostCreate
from models.enums import Role
from services.boosts import BOOST_PLANS, boost_row

router = APIRouter(
    prefix="/boosts",
    tags=["Property Boosts"],
)

owner_only = requires_role([Role.owner])


def _get_owned(table: str, row_id: str, owner_id: str, label: str) -> dict:
    row = safe_select(table, {"id": row_id}, single=True)
    if not row:
        raise HTTPException(404, f"{label} {row_id} not found")
    if row.get("owner_id") != owner_id:
        raise HTTPException(403, f"Not your {label.lower()}")
    return row


@router.get("/plans", summary="Boost plans and prices")
def list_plans():
    return BOOST_PLANS


# -----------------------------------------------------
# GET /boosts
# Active boosts on one property, or on all my properties
# -----------------------------------------------------
@router.get("", summary="List active boosts")
def list_boosts(
    property_id: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
):
    filters = {"is_active": True}
    if property_id:
        filters["property_id"] = property_id
    else:
        filters["owner_id"] = current_user.id
    return safe_select("property_boosts", filters, order_by="created_at")


# -----------------------------------------------------
# POST /boosts (property owner)
# -----------------------------------------------------
@router.post("", summary="Boost a property")
def create_boost(
    payload: BoostCreate,
    current_user: CurrentUser = Depends(owner_only),
):
    _get_owned("properties", payload.property_id, current_user.id, "Property")

    created = safe_insert("property_boosts", boost_row(current_user.id, payload))
    if not created:
        raise HTTPException(500, "Failed to boost property")

    logger.info(f"Property {payload.property_id} boosted ({payload.boost_type.value}) by {current_user.id}")
    return created


# -----------------------------------------------------
# PATCH /boosts/{id}/cancel
# -----------------------------------------------------
@router.patch("/{boost_id}/cancel", summary="Cancel a boost")
def cancel_boost(
    boost_id: str,
    current_user: CurrentUser = Depends(owner_only),
):
    _get_owned("property_boosts", boost_id, current_user.id, "Boost")
    return safe_update("property_boosts", {"id": boost_id}, {"is_active": False})
