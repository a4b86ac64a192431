"""
DoubleDash Analytics - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doubledash.core.config import settings
from doubledash.core.logging import setup_logging, get_logger
from doubledash.api import analytics

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info(
        "Starting DoubleDash Analytics",
        version="1.0.0",
        timezone=settings.ANALYTICS_TIMEZONE,
    )

    yield

    # Shutdown
    analytics.get_activity_cache().clear()
    logger.info("Shutting down DoubleDash Analytics")


app = FastAPI(
    title="DoubleDash Analytics API",
    description="Running activity analytics for the DoubleDash dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "doubledash-analytics"}
