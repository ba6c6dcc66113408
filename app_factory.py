from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from config import get_settings
from routers.v1 import v1_router
from services.draft_plan_generator import DraftPlanGenerator
from services.error_handlers import register_exception_handlers
from services.logger_singleton import LoggerSingleton
from services.mongo_client import close_mongo_client, get_mongo_db
from services.repair_planner import RepairPlanner
from services.repair_store import RepairStore
from version import __version__

logger = LoggerSingleton.get_logger(__name__)


# Lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Missing connection or model settings are fatal here, before any request is served
    settings.validate()

    logger.info("Starting up repair planner...")
    db = get_mongo_db(settings)
    store = RepairStore.from_settings(db, settings)
    generator = DraftPlanGenerator.from_settings(settings)
    app.state.repair_planner = RepairPlanner(store, generator)
    logger.info(f"✅ Repair planner ready (database={db.name}, model={settings.model})")

    try:
        yield
    finally:
        logger.info("Shutting down repair planner...")
        app.state.repair_planner = None
        try:
            await generator.client.close()
        except Exception as e:
            logger.warning(f"Error closing OpenAI client: {e}")
        await close_mongo_client()
        logger.info("Lifespan shutdown complete")


# Main app factory
def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Repair Planner API",
        description=(
            "Turns diagnosed equipment faults into stored repair work orders.\n"
            "## Planning\n"
            "- Required skills and parts are looked up from the fault type\n"
            "- Qualified technicians and in-stock parts are read from MongoDB\n"
            "- A language model drafts the plan, which is then reconciled with the domain rules"
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan if use_lifespan else None,
    )

    # Middleware
    settings = get_settings()
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def add_server_timing_headers(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["Server-Timing"] = f"app;dur={duration_ms:.1f}"
        return response

    register_exception_handlers(app)
    app.include_router(v1_router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Basic health check that returns healthy if the application is running"""
        return {
            "status": "healthy",
            "message": "Service is running",
            "version": __version__,
        }

    return app
