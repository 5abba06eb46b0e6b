# routers/dashboard.py

from fastapi import APIRouter, Depends, HTTPException

from core.errors import ProfileNotFound, RoleNotAssigned
from dependencies.auth import CurrentUser, get_current_user
from routers.profile import ROLE_REQUIRED
from services.dashboards import build_dashboard
from services.profiles import load_profile

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("", summary="Role dashboard for the current user")
def get_dashboard(current_user: CurrentUser = Depends(get_current_user)):
    """
    Summary numbers plus the rows the role works with:
    - tenant: bookings, visits
    - owner: properties, bookings, leads
    - agent: leads (with pipeline stats), commissions
    - vendor / technician: rating, jobs, availability
    - admin: platform counts
    """
    try:
        profile = load_profile(current_user.id)
    except RoleNotAssigned:
        return ROLE_REQUIRED
    except ProfileNotFound:
        raise HTTPException(404, "Profile not found")

    return build_dashboard(profile)
