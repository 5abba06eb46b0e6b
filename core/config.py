from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "RentPe API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = Field(None)

    RENTPE_DOMAINS: List[str] = [
        "https://rentpe.in",
        "https://www.rentpe.in",
        "https://app.rentpe.in",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None)
    SUPABASE_ANON_KEY: Optional[str] = Field(None)
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None)

    # -------------------------------------------------
    # Wizard Sessions
    # -------------------------------------------------
    # Abandoned wizards are dropped after this many seconds of inactivity
    WIZARD_SESSION_TTL_SECONDS: int = Field(3600, description="Idle lifetime of a wizard session (default: 1 hour)")

    # Unset = no timeout (a hung terminal action keeps the wizard submitting)
    WIZARD_SUBMIT_TIMEOUT_SECONDS: Optional[float] = Field(None, description="Optional timeout for terminal actions")

    WIZARD_CLEANUP_INTERVAL_SECONDS: int = Field(300, description="How often idle wizard sessions are swept")
    ENABLE_SCHEDULER: bool = Field(True, description="Run the background cleanup scheduler")

    # -------------------------------------------------
    # Agent Commissions
    # -------------------------------------------------
    AGENT_ONBOARDING_COMMISSION_PERCENT: float = Field(10.0, description="Commission on first month's rent for owner onboarding")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add custom frontend domain
if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add RentPe domains
cors_origins.extend([d.rstrip("/") for d in settings.RENTPE_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
