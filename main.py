import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import RoleNotAssigned, UnknownStep, WizardNotFound
from core.logging_config import logger
from core.scheduler import start_scheduler, stop_scheduler

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.wizards import router as wizards_router
from routers.profile import router as profile_router
from routers.dashboard import router as dashboard_router
from routers.bookings import router as bookings_router
from routers.leads import router as leads_router
from routers.notifications import router as notifications_router
from routers.alerts import router as alerts_router
from routers.boosts import router as boosts_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="RentPe API: Supabase-powered rental marketplace (wizards, profiles, dashboards)",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup / shutdown
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info("🚀 Starting RentPe API")
        validate_config_on_startup()
        if settings.ENABLE_SCHEDULER:
            start_scheduler()
        for route in app.routes:
            methods = ",".join(getattr(route, "methods", None) or [])
            logger.debug(f"➡️ {methods:10s} {getattr(route, 'path', '')}")

    @app.on_event("shutdown")
    async def on_shutdown():
        stop_scheduler()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(WizardNotFound)
    async def handle_wizard_not_found(request: Request, exc: WizardNotFound):
        return JSONResponse(status_code=404, content={"detail": "Wizard session not found or expired"})

    @app.exception_handler(UnknownStep)
    async def handle_unknown_step(request: Request, exc: UnknownStep):
        return JSONResponse(status_code=404, content={"detail": f"Unknown step '{exc.step_id}'"})

    @app.exception_handler(RoleNotAssigned)
    async def handle_role_not_assigned(request: Request, exc: RoleNotAssigned):
        return JSONResponse(
            status_code=403,
            content={"detail": "Select a role first", "redirect": "/select-role"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(wizards_router)
    app.include_router(profile_router)
    app.include_router(dashboard_router)
    app.include_router(bookings_router)
    app.include_router(leads_router)
    app.include_router(notifications_router)
    app.include_router(alerts_router)
    app.include_router(boosts_router)

    # Health
    app.include_router(health_router)

    # -------------------------------------------------
    # Root Redirect (frontend)
    # -------------------------------------------------
    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(settings.RENTPE_DOMAINS[0])

    return app


# Create the global FastAPI instance
app = create_app()
