from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# APP ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Mirrors the app_role enum in Supabase."""

    tenant = "tenant"
    owner = "owner"
    agent = "agent"
    vendor = "vendor"
    technician = "technician"
    admin = "admin"


# Roles a user may pick for themselves on the role-selection screen
SELF_SELECTABLE_ROLES = [Role.tenant, Role.owner, Role.agent, Role.vendor, Role.technician]


# -----------------------------------------------------
# BOOKING STATUS
# -----------------------------------------------------
class BookingStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"
    completed = "completed"


# -----------------------------------------------------
# OWNER LEAD STATUS
# -----------------------------------------------------
class LeadStatus(BaseStrEnum):
    """Agent pipeline for owner leads."""

    new = "new"
    contacted = "contacted"
    visit_scheduled = "visit_scheduled"
    visit_completed = "visit_completed"
    onboarded = "onboarded"
    rejected = "rejected"
    lost = "lost"


# -----------------------------------------------------
# VISIT STATUS
# -----------------------------------------------------
class VisitStatus(BaseStrEnum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


# -----------------------------------------------------
# PROPERTY TYPE / FURNISHING
# -----------------------------------------------------
class PropertyType(BaseStrEnum):
    rk1 = "1rk"
    bhk1 = "1bhk"
    bhk2 = "2bhk"
    bhk3 = "3bhk"
    bhk4 = "4bhk"
    villa = "villa"
    pg = "pg"


class Furnishing(BaseStrEnum):
    fully_furnished = "fully_furnished"
    semi_furnished = "semi_furnished"
    unfurnished = "unfurnished"


# -----------------------------------------------------
# COMMISSIONS
# -----------------------------------------------------
class CommissionType(BaseStrEnum):
    owner_onboarding = "owner_onboarding"
    tenant_placement = "tenant_placement"
    monthly_recurring = "monthly_recurring"


class CommissionStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    paid = "paid"
    cancelled = "cancelled"


# -----------------------------------------------------
# MAINTENANCE PRIORITY
# -----------------------------------------------------
class TicketPriority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


# -----------------------------------------------------
# NOTIFICATION TYPE (in-app notifications table)
# -----------------------------------------------------
class NotificationType(BaseStrEnum):
    visit = "visit"
    booking = "booking"
    maintenance = "maintenance"
    payment = "payment"
    system = "system"
    lead = "lead"
    commission = "commission"
    property = "property"
    service = "service"
    agreement = "agreement"


# -----------------------------------------------------
# PROPERTY BOOSTS
# -----------------------------------------------------
class BoostType(BaseStrEnum):
    featured = "featured"
    premium = "premium"
    spotlight = "spotlight"


# -----------------------------------------------------
# WIZARD STATUS
# -----------------------------------------------------
class WizardStatus(BaseStrEnum):
    """editing → submitting → complete | failed (failed → editing)."""

    editing = "editing"
    submitting = "submitting"
    complete = "complete"
    failed = "failed"
