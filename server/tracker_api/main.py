"""Time Tracker Analytics API - FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import db_manager
from .routes import metrics, streaks, weekly_review, correlations

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the SQLite schema on first start."""
    db_manager.initialize()
    yield


app = FastAPI(
    title="Time Tracker Analytics API",
    description="Behavioral metrics, streaks, weekly reviews and mood correlations",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(metrics.router)
app.include_router(streaks.router)
app.include_router(weekly_review.router)
app.include_router(correlations.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "tracker-api"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "server.tracker_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
