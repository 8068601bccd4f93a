import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import auth, profile, resume, interview, application, dashboard, history, health

# ✅ Import Core Services
from app.core import config
from app.core.logging_config import setup_logging, sanitize_log_data
from app.db.session import Database
from app.llm.openai_provider import build_provider
from app.llm.runner import LLMRunner
from app.services.interview_engine import InterviewEngine
from app.services.interview_fallbacks import load_fallback_bank
from app.services.speech_engine import SpeechEngine

logger = logging.getLogger(__name__)


def _startup_settings() -> dict:
    return {
        "database_url": config.DATABASE_URL,
        "openai_api_key": config.OPENAI_API_KEY,
        "interview_model": config.INTERVIEW_MODEL,
        "run_migrations": config.RUN_MIGRATIONS,
        "cors_origins": config.CORS_ORIGINS,
    }


def build_interview_engine() -> InterviewEngine:
    """Wire the engine from environment configuration."""
    return InterviewEngine(
        llm=LLMRunner(build_provider()),
        fallbacks=load_fallback_bank(),
        speech=SpeechEngine(),
    )


def create_app(
    database: Optional[Database] = None,
    interview_engine: Optional[InterviewEngine] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the API. Collaborators that are not passed in are built from
    environment configuration when the app starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if configure_logging:
            setup_logging(config.LOG_LEVEL)

        db = database
        if db is None:
            if config.RUN_MIGRATIONS:
                from app.db.migrate import run_migrations
                run_migrations()
            db = Database(config.DATABASE_URL, create_schema=not config.RUN_MIGRATIONS)
        db.connect()

        app.state.database = db
        app.state.interview_engine = interview_engine or build_interview_engine()
        logger.info(f"Careerpilot API started: {sanitize_log_data(_startup_settings())}")
        try:
            yield
        finally:
            db.close()
            logger.info("Careerpilot API stopped")

    # ============================================
    # ✅ FASTAPI APP INIT
    # ============================================

    app = FastAPI(title="Careerpilot API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # ============================================
    # ✅ REGISTER ALL ROUTERS
    # ============================================

    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(resume.router)
    app.include_router(interview.router)
    app.include_router(application.router)
    app.include_router(dashboard.router)
    app.include_router(history.router)
    app.include_router(health.router)

    @app.get("/")
    def root():
        return {"status": "Careerpilot API running"}

    return app


app = create_app()
