import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from scholarcast.config import settings

logger = logging.getLogger(__name__)
from scholarcast.routes import grading, health, illustrations
from scholarcast.providers.registry import provider_registry
from scholarcast.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle events"""
    # Initialize database
    await init_db()

    # Startup: Build provider registry from settings
    provider_registry.initialize(settings)

    yield

    # Shutdown: Cleanup resources
    await provider_registry.cleanup()


app = FastAPI(
    title="ScholarCast Backend API",
    description="Multi-provider AI grading feedback and course illustrations",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware (nginx handles external access, but useful for dev)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are rejected before any provider is called"""
    logger.info(f"Rejected invalid request to {request.url.path}: {len(exc.errors())} error(s)")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(grading.router, prefix="/api", tags=["grading"])
app.include_router(illustrations.router, prefix="/api", tags=["illustrations"])
