# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


# ============================================================
# Domain exceptions
# ============================================================

class RentPeError(Exception):
    """Base class for errors raised by the service layer."""


class RoleNotAssigned(RentPeError):
    """
    Authenticated user has not picked a role yet.
    Expected intermediate state: callers redirect to role selection.
    """

    def __init__(self, user_id: str):
        super().__init__(f"No role assigned for user {user_id}")
        self.user_id = user_id


class ProfileNotFound(RentPeError):
    """No row in `profiles` for this user."""

    def __init__(self, user_id: str):
        super().__init__(f"Profile not found for user {user_id}")
        self.user_id = user_id


class ProfileIncomplete(RentPeError):
    """
    Role is assigned but the role extension row has not been provisioned.
    Callers fall back to default extension values.
    """

    def __init__(self, user_id: str, role: str):
        super().__init__(f"No {role} profile row for user {user_id}")
        self.user_id = user_id
        self.role = role


class RoleAlreadyAssigned(RentPeError):
    """Roles are picked once; changing role is an admin operation."""

    def __init__(self, user_id: str, role: str):
        super().__init__(f"User {user_id} already has role {role}")
        self.user_id = user_id
        self.role = role


class UnknownStep(RentPeError):
    def __init__(self, step_id: str):
        super().__init__(f"Unknown wizard step: {step_id}")
        self.step_id = step_id


class WizardNotFound(RentPeError):
    def __init__(self, wizard_id: str):
        super().__init__(f"Wizard session not found: {wizard_id}")
        self.wizard_id = wizard_id


# ============================================================
# Supabase error helpers
# ============================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST / GoTrue errors expose .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to update booking")
        status_code: HTTP status code (default 500)
    """
    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=409, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
