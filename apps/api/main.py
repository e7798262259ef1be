"""
CodeCast - FastAPI Backend
Main application entry point with storage bootstrap and API routing.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, validate_security_settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    auth,
    users,
    videos,
    comments,
    creator,
    admin,
    watch_history,
    watch_later,
)
from services.errors import CodecastError, error_detail
from services.seed import seed_demo_data
from services.storage import build_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting CodeCast API...")
    validate_security_settings()
    storage = build_storage(settings.STORAGE_BACKEND)
    if storage.backend_name == "database" and settings.AUTO_CREATE_DB_SCHEMA:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("🗄️ Database schema verified.")
    app.state.storage = storage
    print(f"📦 Storage backend: {storage.backend_name}")
    if settings.SEED_DEMO_DATA:
        result = await seed_demo_data(storage)
        print(f"🌱 Demo seed: users={result['users']} videos={result['videos']}")
    yield
    # Shutdown
    await engine.dispose()
    print("👋 Shutting down API...")


app = FastAPI(
    title="CodeCast API",
    description="Browse, publish and moderate programming videos",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CodecastError)
async def codecast_error_handler(request: Request, exc: CodecastError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    detail = error_detail("VALIDATION_ERROR", "Invalid input data")
    detail["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": error_detail("INTERNAL", "Internal server error")})


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(videos.router, prefix="/api/videos", tags=["Videos"])
app.include_router(comments.router, prefix="/api/videos", tags=["Comments"])
app.include_router(creator.router, prefix="/api/creator", tags=["Creator"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(watch_history.router, prefix="/api/watch-history", tags=["Watch History"])
app.include_router(watch_later.router, prefix="/api/watch-later", tags=["Watch Later"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "CodeCast API",
        "version": "0.1.0",
        "status": "running"
    }
