import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from datetime import datetime

from .config import settings
from .core.catalog import validate_catalog_coverage
from .i18n.messages import get_catalog
from .api.routes import router, get_generator
from .api.middleware import setup_middleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting MBTI Real Scene...")

    try:
        validate_catalog_coverage()
        catalog = get_catalog()
        logger.info(f"✅ Locales available: {', '.join(catalog.supported_locales())}")

        generator = get_generator()
        logger.info(f"✅ Scenario generation mode: {generator.generation_method}")
        logger.info("🎯 MBTI Real Scene ready!")

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("👋 Shutting down...")

app = FastAPI(
    title="MBTI Real Scene",
    description="Scenario-based personality assessment",
    version="1.0.0",
    lifespan=lifespan
)

setup_middleware(app)

app.include_router(router, prefix="/api/v1", tags=["Assessment"])


@app.get("/")
async def root():
    """Service index: the order in which a client walks through an assessment"""
    return {
        "service": "MBTI Real Scene",
        "version": "1.0.0",
        "locales": get_catalog().supported_locales(),
        "flow": [
            {"step": "questions", "method": "GET", "path": "/api/v1/questions"},
            {"step": "scenarios", "method": "POST", "path": "/api/v1/scenarios"},
            {"step": "calculate", "method": "POST", "path": "/api/v1/calculate"},
            {"step": "insights", "method": "POST", "path": "/api/v1/insights"},
            {"step": "personality", "method": "GET", "path": "/api/v1/personalities/{mbti_type}"},
        ],
        "sessions": "/api/v1/sessions",
        "docs": "/docs",
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )
