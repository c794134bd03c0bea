"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (orders, site)
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.api import orders, site

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting LaundryPro order intake...")

    try:
        logger.info("Validating configuration...")
        problems = validate_settings()
        if problems:
            for problem in problems:
                logger.warning(f"⚠️ {problem}")
            logger.warning("⚠️ Order submissions will fail until configuration is complete")
        else:
            logger.info("✅ Configuration validated")

        logger.info(f"Messaging provider: {settings.MESSAGING_PROVIDER}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Debug Mode: {settings.DEBUG}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("👋 LaundryPro order intake shut down")


app = FastAPI(
    title="LaundryPro - Pickup Order Intake",
    description="Receives pickup orders from the website and forwards them over WhatsApp",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware; requests without an Origin header are not affected
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Two outbound sends can legitimately take a while
    if process_time > 10.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path} ({process_time:.2f}s)"
        )

    return response


# Register API routes
app.include_router(orders.router, prefix=settings.API_PREFIX, tags=["Orders"])
app.include_router(site.router, prefix=settings.API_PREFIX, tags=["Site"])


# Root endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "LaundryPro API",
        "version": "1.0.0",
        "description": "Pickup order intake for LaundryPro",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    Reports whether messaging configuration is complete.
    """
    problems = validate_settings_safely()
    return {
        "status": "healthy" if not problems else "degraded",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {
            "configuration": "ok" if not problems else "incomplete",
            "messaging_provider": settings.MESSAGING_PROVIDER,
        }
    }


# Readiness check (for Kubernetes/orchestration)
@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check - ready only when orders can actually be forwarded.
    """
    problems = validate_settings_safely()
    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "configuration_incomplete", "problems": problems}
        )
    return {"status": "ready"}


# Liveness check (for Kubernetes/orchestration)
@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness check - indicates if app is alive.
    """
    return {"status": "alive"}


def validate_settings_safely() -> list:
    try:
        return validate_settings()
    except ValueError as e:
        return [str(e)]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
