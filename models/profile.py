# models/profile.py

from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from core.utils import join_list_field
from models.enums import Role


# ===============================================================
# BASE PROFILE (profiles table)
# ===============================================================

class BaseProfile(BaseModel):
    id: str
    full_name: str = ""
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None


# ===============================================================
# ROLE EXTENSIONS (one table per role, keyed by user_id)
# ===============================================================

class ExtensionBase(BaseModel):
    """Missing or null columns fall back to the zero/empty defaults."""

    @classmethod
    def from_row(cls, row: Optional[dict]):
        row = row or {}
        return cls(**{
            k: v for k, v in row.items()
            if k in cls.model_fields and v is not None
        })


class TenantExt(ExtensionBase):
    emergency_contact: Optional[str] = None
    wallet_balance: float = 0


class OwnerExt(ExtensionBase):
    bank_account_number: Optional[str] = None
    bank_ifsc: Optional[str] = None
    pan_number: Optional[str] = None
    total_earnings: float = 0


class AgentExt(ExtensionBase):
    assigned_areas: List[str] = []
    completed_verifications: int = 0
    pending_verifications: int = 0
    rating: float = 0


class VendorExt(ExtensionBase):
    business_name: Optional[str] = None
    service_types: List[str] = []
    service_areas: List[str] = []
    rating: float = 0
    total_jobs: int = 0
    is_available: bool = False


class TechnicianExt(ExtensionBase):
    specializations: List[str] = []
    service_areas: List[str] = []
    rating: float = 0
    completed_jobs: int = 0
    is_available: bool = False


# ===============================================================
# ROLE PROFILE, discriminated on `role`
# ===============================================================

class _RoleProfileBase(BaseModel):
    base: BaseProfile
    # False when the extension row does not exist yet (defaults shown)
    extension_provisioned: bool = True

    def summary(self) -> dict:
        return {}

    def display_fields(self) -> dict:
        """Extension fields as the profile form shows them (lists joined)."""
        return {}


class TenantProfile(_RoleProfileBase):
    role: Literal["tenant"] = "tenant"
    extension: TenantExt = TenantExt()

    def summary(self) -> dict:
        return {
            "wallet_balance": self.extension.wallet_balance,
            "has_emergency_contact": bool(self.extension.emergency_contact),
        }

    def display_fields(self) -> dict:
        return {"emergency_contact": self.extension.emergency_contact or ""}


class OwnerProfile(_RoleProfileBase):
    role: Literal["owner"] = "owner"
    extension: OwnerExt = OwnerExt()

    def summary(self) -> dict:
        ext = self.extension
        return {
            "total_earnings": ext.total_earnings,
            "payout_ready": bool(ext.bank_account_number and ext.bank_ifsc and ext.pan_number),
        }

    def display_fields(self) -> dict:
        ext = self.extension
        return {
            "bank_account_number": ext.bank_account_number or "",
            "bank_ifsc": ext.bank_ifsc or "",
            "pan_number": ext.pan_number or "",
        }


class AgentProfile(_RoleProfileBase):
    role: Literal["agent"] = "agent"
    extension: AgentExt = AgentExt()

    def summary(self) -> dict:
        ext = self.extension
        return {
            "assigned_areas": len(ext.assigned_areas),
            "completed_verifications": ext.completed_verifications,
            "pending_verifications": ext.pending_verifications,
            "rating": ext.rating,
        }

    def display_fields(self) -> dict:
        return {"assigned_areas": join_list_field(self.extension.assigned_areas)}


class VendorProfile(_RoleProfileBase):
    role: Literal["vendor"] = "vendor"
    extension: VendorExt = VendorExt()

    def summary(self) -> dict:
        ext = self.extension
        return {
            "business_name": ext.business_name,
            "rating": ext.rating,
            "total_jobs": ext.total_jobs,
            "is_available": ext.is_available,
        }

    def display_fields(self) -> dict:
        ext = self.extension
        return {
            "business_name": ext.business_name or "",
            "service_types": join_list_field(ext.service_types),
            "service_areas": join_list_field(ext.service_areas),
        }


class TechnicianProfile(_RoleProfileBase):
    role: Literal["technician"] = "technician"
    extension: TechnicianExt = TechnicianExt()

    def summary(self) -> dict:
        ext = self.extension
        return {
            "rating": ext.rating,
            "completed_jobs": ext.completed_jobs,
            "is_available": ext.is_available,
        }

    def display_fields(self) -> dict:
        ext = self.extension
        return {
            "specializations": join_list_field(ext.specializations),
            "service_areas": join_list_field(ext.service_areas),
        }


class AdminProfile(_RoleProfileBase):
    """Admins have no extension table."""

    role: Literal["admin"] = "admin"


RoleProfile = Annotated[
    Union[TenantProfile, OwnerProfile, AgentProfile, VendorProfile, TechnicianProfile, AdminProfile],
    Field(discriminator="role"),
]


# role → (extension table, extension model, profile variant)
EXTENSIONS = {
    Role.tenant: ("tenant_profiles", TenantExt, TenantProfile),
    Role.owner: ("owner_profiles", OwnerExt, OwnerProfile),
    Role.agent: ("agent_profiles", AgentExt, AgentProfile),
    Role.vendor: ("vendor_profiles", VendorExt, VendorProfile),
    Role.technician: ("technician_profiles", TechnicianExt, TechnicianProfile),
}


# ===============================================================
# UPDATE PAYLOADS
# ===============================================================

class BaseProfileUpdate(BaseModel):
    """
    Partial update of the base profile. Only fields present in the
    request are written. Email is not editable.
    """
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# List fields accept the comma-separated text from the form or a list
ListInput = Optional[Union[str, List[str]]]


class TenantExtUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    emergency_contact: Optional[str] = None


class OwnerExtUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bank_account_number: Optional[str] = None
    bank_ifsc: Optional[str] = None
    pan_number: Optional[str] = None


class AgentExtUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assigned_areas: ListInput = None


class VendorExtUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    business_name: Optional[str] = None
    service_types: ListInput = None
    service_areas: ListInput = None


class TechnicianExtUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    specializations: ListInput = None
    service_areas: ListInput = None


EXTENSION_UPDATES = {
    Role.tenant: TenantExtUpdate,
    Role.owner: OwnerExtUpdate,
    Role.agent: AgentExtUpdate,
    Role.vendor: VendorExtUpdate,
    Role.technician: TechnicianExtUpdate,
}

LIST_FIELDS = {"assigned_areas", "service_types", "service_areas", "specializations"}


class RoleSelection(BaseModel):
    role: Role
