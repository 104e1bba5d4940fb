"""
FastAPI application for the Natural Remedy Bridge.

This module creates the REST API exposing the remedy matching service.
"""

from contextlib import asynccontextmanager
import time
import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from natural_remedy_bridge.api.remedy_matching_routes import router as remedy_matching_router
from natural_remedy_bridge.data.database import engine, init_db

# Configure logging
log_handlers = [logging.StreamHandler()]
if settings.log_file:
    log_handlers.append(logging.FileHandler(settings.log_file))
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=log_handlers
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine)
    yield


# Create FastAPI application
app = FastAPI(
    title="Natural Remedy Bridge API",
    description="Deterministic matching of pharmaceutical drugs to natural-remedy alternatives",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(remedy_matching_router)

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "endpoints": {
            "rank": "/api/remedy-matching/rank",
            "matches": "/api/remedy-matching/drugs/{drug_id}/matches",
            "mappings": "/api/remedy-matching/drugs/{drug_id}/mappings"
        }
    }

# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "services": {
            "remedy_matching": "ready"
        }
    }

# Error handling
@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler."""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail} - Path: {request.url.path}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "status_code": exc.status_code,
                "message": exc.detail,
                "path": str(request.url.path),
                "timestamp": time.time()
            }
        }
    )

# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all API requests."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.3f}s")

    return response
