"""FastAPI application entry point.

Workload Tracker - an internal service tracking tasks, live issues and
projects across a multi-level reporting hierarchy.
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.exceptions import register_exception_handlers
from routers.v1 import router as v1_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Workload Tracker",
    description="""
    Internal service for tracking team workload.

    ## Features

    - Hierarchy-aware visibility across head LTs, LTs, ALTs, managers,
      team leads and employees
    - Effort estimation from a configurable type/complexity table
    - Task and live issue status rollup from component statuses
    - Worklog capacity enforcement and completion reconciliation
    - Stage-driven project schedule tracking with a change ledger

    ## Authentication

    All endpoints require Azure AD Bearer token authentication.
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Check if the service is running.",
)
async def health_check() -> dict:
    """Return service health status."""
    return {
        "status": "healthy",
        "service": "workload-tracker",
        "version": "1.0.0",
    }


# Include API routers
app.include_router(
    v1_router,
    prefix="/api",
)

logger.info("Workload Tracker initialized")
