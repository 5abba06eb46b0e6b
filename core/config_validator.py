# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    # Every read and write goes through the service-role client
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_config_values() -> List[str]:
    """Range checks on the numeric settings. Returns a list of problems."""
    problems = []

    if settings.WIZARD_SESSION_TTL_SECONDS <= 0:
        problems.append("WIZARD_SESSION_TTL_SECONDS must be positive")

    timeout = settings.WIZARD_SUBMIT_TIMEOUT_SECONDS
    if timeout is not None and timeout <= 0:
        problems.append("WIZARD_SUBMIT_TIMEOUT_SECONDS must be positive when set")

    if not 0 <= settings.AGENT_ONBOARDING_COMMISSION_PERCENT <= 100:
        problems.append("AGENT_ONBOARDING_COMMISSION_PERCENT must be between 0 and 100")

    return problems


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of missing optional variables (warnings only).
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")
    if not settings.FRONTEND_DOMAIN:
        warnings.append("FRONTEND_DOMAIN (only the default RentPe domains are allowed by CORS)")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError if critical config is missing or out of range
    in production; logs it elsewhere.
    """
    errors = validate_required_config()
    errors = [f"Missing required environment variable: {name}" for name in errors]
    errors += validate_config_values()

    for warning in validate_optional_config():
        logger.warning(f"Optional configuration missing: {warning}")

    if errors:
        for error in errors:
            logger.error(error)
        if settings.ENV == "production":
            raise RuntimeError("; ".join(errors))
        return

    logger.info("Configuration validation passed")
