"""
FastAPI application for Finsight.

Provides REST API endpoints for:
- Transactions, investments and debts (CRUD)
- View settings
- Dashboard, portfolio, debt and projection metrics
- Backup export/import
- AI advisor chat
"""

import os
import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

# Configures logging for the whole service
import finsight.utils.error_utils  # noqa: F401

logger = logging.getLogger("finsight")

from finsight.api.dependencies import get_session_registry
from finsight.db.connection import get_engine, init_database, get_db_session
from finsight.api.routes import transactions, investments, debts, settings, metrics, data, advisor, demo


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    is_serverless = bool(os.getenv("VERCEL"))
    skip_db_init = bool(os.getenv("SKIP_DB_INIT"))
    if not is_serverless and not skip_db_init:
        # Startup: create tables (pre-created on Vercel)
        logger.info("Initializing database connection...")
        init_database()
    yield
    # Shutdown: write what the debounce windows still hold
    registry = app.dependency_overrides.get(get_session_registry, get_session_registry)()
    if not await registry.flush_all():
        logger.error("Some documents could not be saved on shutdown")
    if not is_serverless and not skip_db_init:
        logger.info("Shutting down...")
        get_engine().dispose()


# Create FastAPI application
app = FastAPI(
    title="Finsight API",
    description="Personal Finance Tracker - Transactions, Portfolio, Debts, Projections and AI Advisor API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS configuration for the web frontend
_default_origins = "http://localhost:3000,http://localhost:5173"
_cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    import traceback
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, str]:
    """API health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "service": "finsight-api",
    }


@app.get("/health/db")
async def health_check_db(db: Session = Depends(get_db_session)):
    """Check database connection health and latency."""
    start = time.time()
    try:
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
            "database": db.get_bind().dialect.name,
        }
    except Exception as e:
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "unhealthy",
            "latency_ms": round(latency_ms, 2),
            "error": str(e)
        }


# Include routers
app.include_router(transactions.router, prefix="/api/transactions", tags=["Transactions"])
app.include_router(investments.router, prefix="/api/investments", tags=["Investments"])
app.include_router(debts.router, prefix="/api/debts", tags=["Debts"])
app.include_router(settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(metrics.router, prefix="/api/metrics", tags=["Metrics"])
app.include_router(data.router, prefix="/api/data", tags=["Data"])
app.include_router(advisor.router, prefix="/api/advisor", tags=["Advisor"])
app.include_router(demo.router, prefix="/api/demo", tags=["Demo"])


# Root endpoint
@app.get("/")
async def root() -> Dict[str, Any]:
    """API root endpoint with service information."""
    return {
        "service": "Finsight API",
        "version": "1.0.0",
        "docs": "/api/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "finsight.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
