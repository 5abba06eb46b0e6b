from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.errors import RoleNotAssigned
from core.supabase_client import get_supabase_client
from models.enums import Role
from services.profiles import resolve_role


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (Supabase Auth identity)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # Supabase Auth UID (= profiles.id)
    email: str

    full_name: Optional[str] = None
    phone: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase: validates JWT)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except Exception:
        raise unauthorized

    if not auth_user.email:
        raise unauthorized

    metadata = auth_user.user_metadata or {}

    return CurrentUser(
        id=auth_user.id,
        email=auth_user.email,
        full_name=metadata.get("full_name"),
        phone=metadata.get("phone"),
    )


# ============================================================
# ROLE CHECKER (role comes from user_roles, not JWT metadata)
# ============================================================
def requires_role(allowed_roles: list[Role]):
    def checker(current_user: CurrentUser = Depends(get_current_user)):
        try:
            role = resolve_role(current_user.id)
        except RoleNotAssigned:
            raise HTTPException(status_code=403, detail="Select a role first")

        if role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Requires one of: {[r.value for r in allowed_roles]}",
            )
        return current_user
    return checker
