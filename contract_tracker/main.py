"""
FastAPI application entry point.

Registers all API routers and handles application startup configuration.
"""

from fastapi import FastAPI
import logging

from contract_tracker.settings import MODE, WORKBOOK_PATH, setup_logging
from contract_tracker.api.dependencies import get_database_url

from contract_tracker.api.routers.tracker_router import router as tracker_router
from contract_tracker.api.routers.jobs_router import router as jobs_router
from contract_tracker.api.routers.activity_router import router as activity_router

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Fails fast on an unknown MODE
DATABASE_URL = get_database_url()

app = FastAPI(
    title="Contract Tracker API",
    description="Subscription contract tracker: cell edits, renewal jobs and reports",
    version="0.1.0",
)

app.include_router(tracker_router, tags=["Tracker Edits"])
app.include_router(jobs_router, tags=["Jobs"])
app.include_router(activity_router, tags=["Activity Log"])

logger.info("[Startup] All routers registered successfully")
logger.info("[Startup] Workbook: %s", WORKBOOK_PATH)
logger.info("[Startup] Application started in %s mode", MODE.upper())
