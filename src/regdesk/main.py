"""
regdesk API - Main Application Entry Point

This module builds and configures the FastAPI application including:
- Database table creation
- Registration workflow (notifier, payment-proof store, event details)
- Admin credential gate
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from regdesk.api import api_router
from regdesk.core.auth import AdminGate
from regdesk.core.config import Settings, get_settings
from regdesk.core.database import close_db, init_db, init_engine
from regdesk.core.email import build_notifier
from regdesk.modules.registrations.service import RegistrationService
from regdesk.modules.registrations.templates import EventDetails
from regdesk.modules.registrations.uploads import PaymentProofStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application from settings.

    Settings are read once here and handed to the components that need them;
    request handlers reach those components through app.state.
    """
    settings = settings or get_settings()
    engine, session_maker = init_engine(settings)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown events including:
        - Database tables
        - Upload directory
        """
        # Startup
        print(f"Starting regdesk API in {settings.python_env} mode...")

        if settings.uses_default_admin_password:
            logger.warning(
                "ADMIN_PASSWORD is the default value - set a strong password before going live"
            )
            if settings.is_production:
                print("[WARN] Default admin password in use")

        try:
            settings.upload_dir.mkdir(parents=True, exist_ok=True)
            print(f"[OK] Upload directory ready: {settings.upload_dir}")
        except OSError as e:
            print(f"[FAIL] Upload directory not available: {e}")
            if settings.is_production:
                raise

        try:
            await init_db(engine)
            print("[OK] Database connected")
        except Exception as e:
            print(f"[FAIL] Database connection failed: {e}")
            if settings.is_production:
                raise

        yield  # Application runs here

        # Shutdown
        print("Shutting down regdesk API...")
        await close_db(engine)
        print("[OK] Cleanup complete")

    app = FastAPI(
        title="regdesk API",
        description="Event registration intake and payment verification API",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = session_maker
    app.state.admin_gate = AdminGate(settings.admin_username, settings.admin_password)
    app.state.registration_service = RegistrationService(
        notifier=build_notifier(settings),
        file_store=PaymentProofStore(settings.upload_dir),
        event=EventDetails.from_settings(settings),
        owner_email=settings.owner_email,
    )

    app.include_router(api_router, prefix="/api/v1")

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint - API welcome message."""
        return {
            "message": "Welcome to regdesk API",
            "status": "running",
            "environment": settings.python_env,
        }

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {"status": "healthy"}

    @app.get("/ready", tags=["Health"])
    async def readiness_check() -> dict[str, str]:
        """Readiness check endpoint."""
        return {"status": "ready"}

    return app


app = create_app()
