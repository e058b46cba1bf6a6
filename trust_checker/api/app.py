"""FastAPI application for the Trust Checker service."""

import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..domain.errors import InvalidRequestError
from ..infrastructure.dependencies import get_service_container
from .endpoints import analyze, extension, fact_check, health, pipeline, sentences, websearch

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application.

    Providers are created lazily on first use and closed on shutdown.
    """
    logger.info("🚀 Trust Checker API starting")
    yield  # Application runs here

    # Shutdown: Cleanup providers
    await get_service_container().shutdown()
    logger.info("👋 Trust Checker API stopped")


# Create FastAPI application
app = FastAPI(
    title="Trust Checker API",
    description="Claim extraction, evidence gathering and verdict generation for web articles",
    version="0.2.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RuntimeError)
async def unavailable_handler(request: Request, exc: RuntimeError) -> JSONResponse:
    """Providers that are not configured surface as 503 from the dependency layer."""
    logger.error(f"❌ Service unavailable: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Include routers
app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(sentences.router)
app.include_router(websearch.router)
app.include_router(fact_check.router)
app.include_router(pipeline.router)
app.include_router(extension.router)
