# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    BookingStatus,
    LeadStatus,
    VisitStatus,
    PropertyType,
    Furnishing,
    CommissionType,
    CommissionStatus,
    TicketPriority,
    NotificationType,
    BoostType,
    WizardStatus,
)

# -------------------------
# Profile Models (role records)
# -------------------------
from .profile import (
    BaseProfile,
    TenantProfile,
    OwnerProfile,
    AgentProfile,
    VendorProfile,
    TechnicianProfile,
    AdminProfile,
    RoleProfile,
    BaseProfileUpdate,
    RoleSelection,
)

# -------------------------
# Request Models
# -------------------------
from .booking import BookingStatusUpdate, LeadStatusUpdate, LeadNotesUpdate
from .wizard import WizardStart, WizardFieldsUpdate, WizardSubmitResponse
from .alert import PropertyAlertCreate, PropertyAlertUpdate
from .boost import BoostCreate

__all__ = [
    # enums
    "Role",
    "BookingStatus",
    "LeadStatus",
    "VisitStatus",
    "PropertyType",
    "Furnishing",
    "CommissionType",
    "CommissionStatus",
    "TicketPriority",
    "NotificationType",
    "BoostType",
    "WizardStatus",

    # profiles
    "BaseProfile",
    "TenantProfile",
    "OwnerProfile",
    "AgentProfile",
    "VendorProfile",
    "TechnicianProfile",
    "AdminProfile",
    "RoleProfile",
    "BaseProfileUpdate",
    "RoleSelection",

    # requests
    "BookingStatusUpdate",
    "LeadStatusUpdate",
    "LeadNotesUpdate",
    "WizardStart",
    "WizardFieldsUpdate",
    "WizardSubmitResponse",
    "PropertyAlertCreate",
    "PropertyAlertUpdate",
    "BoostCreate",
]
