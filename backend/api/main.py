"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import attractions, geocode, route, serp_check
from settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Create app
app = FastAPI(
    title="Route & Attractions Gateway",
    description="Geocoding, driving routes and nearby attractions behind one contract",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(route.router, prefix="/api/route", tags=["route"])
app.include_router(attractions.router, prefix="/api/attractions", tags=["attractions"])
app.include_router(geocode.router, prefix="/api/geocode", tags=["geocode"])
app.include_router(serp_check.router, prefix="/api/test-serp", tags=["diagnostics"])


@app.on_event("startup")
def startup_event():
    """Log which upstream credentials are configured (never their values)."""
    logger.info(
        "Backend starting: SERPAPI_KEY=%s OPENTRIPMAP_API_KEY=%s OPENCAGE_API_KEY=%s RAPIDAPI_KEY=%s",
        bool(settings.SERPAPI_KEY),
        bool(settings.OPENTRIPMAP_API_KEY),
        bool(settings.OPENCAGE_API_KEY),
        bool(settings.RAPIDAPI_KEY),
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "AI Route Optimizer Agent Backend Running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
