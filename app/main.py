"""Group Auto Scheduler Web Application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import create_db_and_tables
from app.core.scheduler import shutdown_scheduler, start_scheduler
from app.routes import occurrences, scheduling

# Configure logging
log_dir = Path.home() / ".logs" / "auto_scheduler"
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    logger.info("Starting Group Auto Scheduler application")
    create_db_and_tables()
    start_scheduler()
    yield
    # Shutdown
    shutdown_scheduler()
    logger.info("Group Auto Scheduler application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Materializes recurring group occurrences, auto-assigns people and confirms their attendance",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for external access
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(scheduling.router)
app.include_router(occurrences.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
