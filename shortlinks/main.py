"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Rate limiting
- Link store lifecycle (startup/shutdown)
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shortlinks.api import endpoints
from shortlinks.core.logging_config import setup_logging
from shortlinks.core.rate_limit import limiter
from shortlinks.core.setting import settings
from shortlinks.core.store_manager import initialize_store, shutdown_store
from shortlinks.middleware.logging import add_logging_middleware

setup_logging(settings.LOG_LEVEL)

# Docs are served under /api so they never shadow a short code
app = FastAPI(
    title="Short Link Service",
    description="Shortens URLs with optional custom codes and expiry",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with service information."""
    return {
        "message": "Short Link Service",
        "version": "1.0.0",
        "docs": "/api/docs"
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


app.include_router(endpoints.api_router, tags=["Short Links"])
# Catch-all /{short_code} route is registered last
app.include_router(endpoints.redirect_router, tags=["Redirect"])


@app.on_event("startup")
async def startup_event():
    """Build the link store on startup."""
    await initialize_store(app)


@app.on_event("shutdown")
async def shutdown_event():
    """Dispose the link store on shutdown."""
    await shutdown_store(app)
