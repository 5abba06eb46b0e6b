# routers/health.py

from fastapi import APIRouter
from core.config import settings
from core.supabase_client import ping_supabase
from core.wizard_registry import get_registry

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Checks Supabase connection + table queries
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
def health_db():
    """
    Verifies Supabase connectivity.
    - Checks if URL + service-role key are configured
    - Attempts a one-row read on the core marketplace tables
    - Returns per-table status

    Safe for external health monitors (no auth required).
    """
    try:
        status = ping_supabase()
        return {
            "service": "Supabase",
            "status": status.get("status", "unknown"),
            "details": status,
        }

    except Exception as e:
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }


# -----------------------------------------------------
# GET /health/app
# Lightweight liveness check
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    """
    Liveness for uptime monitors. Also reports how many wizard
    sessions are currently open on this instance.
    """
    registry = get_registry()
    registry.cleanup_expired()
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
        "env": settings.ENV,
        "open_wizards": registry.size(),
    }
