"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import time
from loguru import logger

from food_journal.core.config import settings
from food_journal.core.logging import setup_logging
from food_journal.api.v1.api import api_router
from food_journal.db.base import init_db

# Setup logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    await init_db()
    logger.info(f"Food Journal API started ({settings.ENV})")
    yield


# Create FastAPI app
app = FastAPI(
    title="Food Journal API",
    description="Personal dish reviews: would you order it again?",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.ENV != "production" else None,
    docs_url=f"{settings.API_V1_STR}/docs" if settings.ENV != "production" else None,
    redoc_url=f"{settings.API_V1_STR}/redoc" if settings.ENV != "production" else None,
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENV == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} in {process_time:.3f}s")

    response.headers["X-Process-Time"] = str(process_time)

    return response


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Review photos written by LocalPhotoStorage
app.mount("/media", StaticFiles(directory=settings.PHOTO_STORAGE_DIR, check_dir=False), name="media")


@app.get("/")
async def root():
    """Root endpoint for health checks."""
    return {
        "message": "Food Journal API",
        "version": "1.0.0",
        "status": "healthy",
        "environment": settings.ENV
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENV
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "food_journal.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
