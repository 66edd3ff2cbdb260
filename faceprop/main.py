"""
Face Proportion API - Main Entry Point

FastAPI application for landmark-based proportion analysis and
offline-tolerant sample registration.
Uses core/ for configuration, exceptions, and logging.
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from faceprop.core.config import Settings, settings, VERSION
from faceprop.core.exceptions import AppException
from faceprop.core.responses import ApiResponse
from faceprop.core.logging import setup_logging, get_logger
from faceprop.infrastructure import FileStore, HttpUploadTransport
from faceprop.routers import analysis, registration
from faceprop.services.analysis_service import ProportionAnalysisService
from faceprop.services.registration import RegistrationQueue, UploadTransport, LocalStore

logger = get_logger(__name__)


def create_app(
    app_settings: Settings = None,
    analysis_service: ProportionAnalysisService = None,
    registration_queue: RegistrationQueue = None,
    transport: UploadTransport = None,
    store: LocalStore = None,
) -> FastAPI:
    """
    Build the application and inject services into routers.
    Anything not passed in is built from settings.
    """
    cfg = app_settings or settings

    app = FastAPI(
        title="Face Proportion API",
        description="Facial proportion analysis and sample registration queue",
        version=VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ============================================================
    # Global Exception Handlers
    # ============================================================

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.warning(f"AppException: {exc.code} - {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse.from_exception(exc).model_dump()
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ApiResponse.fail(
                message="Internal server error",
                code="INTERNAL_ERROR"
            ).model_dump()
        )

    # ============================================================
    # Service Initialization (Dependency Injection)
    # ============================================================

    if analysis_service is None:
        analysis_service = ProportionAnalysisService.from_settings(cfg)
        logger.info(f"✓ Created ProportionAnalysisService (metric set '{cfg.metric_set}')")

    if registration_queue is None:
        registration_queue = RegistrationQueue(
            transport=transport or HttpUploadTransport(
                endpoint=cfg.registration_endpoint,
                user_id=cfg.registration_user_id,
                timeout=cfg.upload_timeout,
            ),
            store=store or FileStore(cfg.storage_dir),
            queue_key=cfg.queue_key,
        )
        registration_queue.load()
        logger.info("✓ Created RegistrationQueue")

    analysis.set_services(analysis_service)
    registration.set_services(registration_queue)
    app.state.analysis_service = analysis_service
    app.state.registration_queue = registration_queue

    # ============================================================
    # Root Endpoints
    # ============================================================

    @app.get("/api/health")
    async def health_check():
        """Service status and queue size."""
        return ApiResponse.ok({
            "status": "healthy",
            "service": "faceprop",
            "version": VERSION,
            "pending": len(registration_queue.pending),
        }).model_dump()

    # ============================================================
    # Router Registration
    # ============================================================

    app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])
    app.include_router(registration.router, prefix="/api/registration", tags=["registration"])

    return app


def run():
    """Console entry point."""
    setup_logging(level="DEBUG" if settings.debug else settings.log_level)
    logger.info(f"Starting Face Proportion API v{VERSION}")
    uvicorn.run(
        "faceprop.main:create_app",
        factory=True,
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
