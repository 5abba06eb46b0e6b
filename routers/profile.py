# routers/profile.py

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from core.errors import ProfileNotFound, RoleAlreadyAssigned, RoleNotAssigned
from core.logging_config import logger
from dependencies.auth import CurrentUser, get_current_user
from models.enums import Role
from models.profile import EXTENSION_UPDATES, BaseProfileUpdate, RoleSelection
from services import profiles

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
)


ROLE_REQUIRED = {"status": "role_required", "redirect": "/select-role"}


def _profile_response(profile) -> dict:
    return {
        "status": "ok",
        "role": profile.role,
        "profile": profile.model_dump(mode="json"),
        "form": profile.display_fields(),
        "summary": profile.summary(),
    }


# -----------------------------------------------------
# GET /profile/me
# Users who have not picked a role yet get a redirect
# hint instead of an error.
# -----------------------------------------------------
@router.get("/me", summary="Current user's profile")
def get_my_profile(current_user: CurrentUser = Depends(get_current_user)):
    try:
        profile = profiles.load_profile(current_user.id)
    except RoleNotAssigned:
        return ROLE_REQUIRED
    except ProfileNotFound:
        raise HTTPException(404, "Profile not found")

    return _profile_response(profile)


# -----------------------------------------------------
# PATCH /profile/me: base fields (name, phone, address)
# -----------------------------------------------------
@router.patch("/me", summary="Update base profile fields")
def update_my_profile(
    payload: BaseProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        base = profiles.save_base_fields(current_user.id, payload)
    except ProfileNotFound:
        raise HTTPException(404, "Profile not found")

    return {"status": "ok", "profile": base.model_dump(mode="json")}


# -----------------------------------------------------
# PATCH /profile/me/extension: role-specific fields
# -----------------------------------------------------
@router.patch("/me/extension", summary="Update role-specific profile fields")
def update_my_extension(
    payload: dict,
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        role = profiles.resolve_role(current_user.id)
    except RoleNotAssigned:
        return ROLE_REQUIRED

    update_model = EXTENSION_UPDATES.get(role)
    if update_model is None:
        raise HTTPException(400, f"Role '{role.value}' has no profile details")

    # Validated against the caller's role, which is only known here
    try:
        update = update_model(**payload)
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))

    profiles.save_extension_fields(current_user.id, role, update.model_dump(exclude_unset=True))
    return _profile_response(profiles.load_profile(current_user.id, role))


# -----------------------------------------------------
# POST /profile/me/role: first-time role selection
# -----------------------------------------------------
@router.post("/me/role", summary="Select a role")
def select_my_role(
    payload: RoleSelection,
    current_user: CurrentUser = Depends(get_current_user),
):
    if payload.role == Role.admin:
        raise HTTPException(403, "Admin role cannot be self-selected")

    try:
        profile = profiles.select_role(current_user.id, payload.role)
    except RoleAlreadyAssigned as e:
        raise HTTPException(409, f"Role already selected: {e.role}")
    except ProfileNotFound:
        raise HTTPException(404, "Profile not found")

    logger.info(f"User {current_user.id} is now a {payload.role.value}")
    return _profile_response(profile)
