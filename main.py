"""
FastAPI Application Entry Point

Integrates:
  - Messenger webhook handler
  - Account-linking page
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 5000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from transport.messenger.webhook import router as messenger_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Weather bot starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Server URL: {Config.SERVER_URL or '(not set)'}")
    if not Config.validate():
        logger.error("Missing config values; webhook requests will be rejected")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Weather bot shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Messenger Weather Bot",
    description="Messenger webhook bot answering weather questions",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(messenger_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check: required configuration present."""
    missing = Config.missing()
    if missing:
        return {"status": "not_ready", "missing": missing}
    return {"status": "ready"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Messenger Weather Bot",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "webhook_challenge": "GET /webhook",
            "webhook": "POST /webhook",
            "authorize": "GET /authorize",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
