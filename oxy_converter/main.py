"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn oxy_converter.main:app --reload
"""

from fastapi import FastAPI  # The FastAPI framework
from fastapi.middleware.cors import CORSMiddleware  # Cross-Origin Resource Sharing

from oxy_converter.core.config import settings  # Application settings
from oxy_converter.monitoring import configure_logging
from oxy_converter.routers import convert  # HTML conversion endpoints

configure_logging(settings.LOG_LEVEL)

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
# - title: Shown in the automatic API documentation (Swagger UI)
# - docs_url: Visit http://localhost:8000/docs to test endpoints
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The admin panel calls the API from the builder's origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# convert.router: /convert, /convert/preview, /convert/batch
app.include_router(convert.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
