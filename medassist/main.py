"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging
from .auth.router import router as auth_router
from .database import Base, engine
from .config import settings, validate_runtime_config
from .auth import models as auth_models  # noqa: F401  (registers tables)
from .patients import models as patient_models  # noqa: F401
from .exceptions import register_exception_handlers
from .core.middleware import setup_middlewares

APP_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Validate configuration and create database tables if they don't exist.
    """
    validate_runtime_config()
    logger.info("Starting Medical Assistance API...")
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Medical Assistance API stopped")

# Create FastAPI application
app = FastAPI(
    title="Medical Assistance API",
    description="Account, login and credential API for patients, counselors and doctors",
    version=APP_VERSION,
    lifespan=lifespan
)

# Register exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware
setup_middlewares(app)

# Include routers
app.include_router(auth_router)

# Root endpoint
@app.get("/")
def root():
    """
    Root endpoint for API health check.

    Returns:
        dict: Welcome message and API version
    """
    return {"message": "Welcome to Medical Assistance API", "version": APP_VERSION}

# Health check endpoint
@app.get("/health")
def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {str(e)}")
        return {"status": "degraded", "database": "unavailable"}
    return {"status": "healthy", "database": "connected"}
