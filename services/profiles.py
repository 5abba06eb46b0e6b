# services/profiles.py

"""
Role-record aggregation.

A user's profile is spread over three tables: `profiles` (base fields
shared by every role), `user_roles` (which role they picked) and one
extension table per role. This module reads and writes them as a single
RoleProfile discriminated on the role.
"""

from typing import Optional

from fastapi import HTTPException

from core.errors import (
    ProfileIncomplete,
    ProfileNotFound,
    RoleAlreadyAssigned,
    RoleNotAssigned,
)
from core.logging_config import get_logger
from core.supabase_helpers import safe_insert, safe_select, safe_update, safe_upsert
from core.utils import join_list_field, split_list_field, utc_now_iso
from models.enums import SELF_SELECTABLE_ROLES, Role
from models.profile import (
    EXTENSIONS,
    LIST_FIELDS,
    AdminProfile,
    BaseProfile,
    BaseProfileUpdate,
    RoleProfile,
)


logger = get_logger("profiles")

__all__ = [
    "resolve_role",
    "fetch_base_profile",
    "fetch_extension",
    "load_profile",
    "save_base_fields",
    "save_extension_fields",
    "select_role",
    "split_list_field",
    "join_list_field",
]


# -------------------------------------------------------------
# Reads
# -------------------------------------------------------------
def resolve_role(user_id: str) -> Role:
    """The user's role from user_roles. Raises RoleNotAssigned when unset."""
    row = safe_select("user_roles", {"user_id": user_id}, single=True, columns="role")
    if not row or not row.get("role"):
        raise RoleNotAssigned(user_id)
    return Role(row["role"])


def fetch_base_profile(user_id: str) -> BaseProfile:
    row = safe_select("profiles", {"id": user_id}, single=True)
    if not row:
        raise ProfileNotFound(user_id)
    return BaseProfile(**{k: v for k, v in row.items() if k in BaseProfile.model_fields and v is not None})


def fetch_extension(user_id: str, role: Role):
    """
    The role's extension record. Raises ProfileIncomplete when the row
    has not been provisioned yet.
    """
    if role not in EXTENSIONS:
        raise ValueError(f"Role {role.value} has no extension table")

    table, ext_model, _ = EXTENSIONS[role]
    row = safe_select(table, {"user_id": user_id}, single=True)
    if not row:
        raise ProfileIncomplete(user_id, role.value)
    return ext_model.from_row(row)


def load_profile(user_id: str, role: Optional[Role] = None) -> RoleProfile:
    """
    Base profile plus exactly one extension lookup, for the given role
    (resolved from user_roles when not passed).
    """
    role = role or resolve_role(user_id)
    base = fetch_base_profile(user_id)

    if role == Role.admin:
        return AdminProfile(base=base)

    _, ext_model, variant = EXTENSIONS[role]
    try:
        extension = fetch_extension(user_id, role)
        provisioned = True
    except ProfileIncomplete:
        logger.info(f"No {role.value} profile row for {user_id}; using defaults")
        extension = ext_model()
        provisioned = False

    return variant(base=base, extension=extension, extension_provisioned=provisioned)


# -------------------------------------------------------------
# Writes
# -------------------------------------------------------------
def save_base_fields(user_id: str, update: BaseProfileUpdate) -> Optional[BaseProfile]:
    """Partial update: only fields present in the request are written."""
    data = update.model_dump(exclude_unset=True)
    if not data:
        return fetch_base_profile(user_id)

    data["updated_at"] = utc_now_iso()
    row = safe_update("profiles", {"id": user_id}, data)
    if not row:
        raise ProfileNotFound(user_id)

    logger.info(f"Profile {user_id} updated: {sorted(data)}")
    return BaseProfile(**{k: v for k, v in row.items() if k in BaseProfile.model_fields and v is not None})


def extension_row(user_id: str, values: dict) -> dict:
    """List columns arrive as comma-separated text and are stored as arrays."""
    row = {"user_id": user_id}
    for key, value in values.items():
        row[key] = split_list_field(value) if key in LIST_FIELDS else value
    return row


def save_extension_fields(user_id: str, role: Role, values: dict) -> dict:
    """
    Upsert the role's extension row on user_id. The row is created on the
    first save when it was never provisioned.
    """
    if role not in EXTENSIONS:
        raise HTTPException(400, f"Role '{role.value}' has no profile details")

    table, _, _ = EXTENSIONS[role]
    row = extension_row(user_id, values)
    row["updated_at"] = utc_now_iso()

    saved = safe_upsert(table, row, on_conflict="user_id")
    logger.info(f"{table} saved for {user_id}")
    return saved or row


def select_role(user_id: str, role: Role) -> RoleProfile:
    """
    First-time role selection: record the role and provision an empty
    extension row. Admin is never self-selectable.
    """
    if role not in SELF_SELECTABLE_ROLES:
        raise HTTPException(403, f"Role '{role.value}' cannot be self-selected")

    existing = safe_select("user_roles", {"user_id": user_id}, single=True, columns="role")
    if existing and existing.get("role"):
        raise RoleAlreadyAssigned(user_id, existing["role"])

    safe_insert("user_roles", {"user_id": user_id, "role": role.value})

    table, _, _ = EXTENSIONS[role]
    safe_upsert(table, {"user_id": user_id}, on_conflict="user_id")

    logger.info(f"🎭 User {user_id} selected role {role.value}")
    return load_profile(user_id, role)
