"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import accounts, auth, dashboard, link, manual_assets, sync, transactions
from config import settings
from database import dispose_engine
from logging_config import setup_logging
from scheduler import SyncScheduler

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the sync scheduler (when enabled) and release resources on shutdown."""
    sync_scheduler = None
    if settings.SCHEDULER_ENABLED:
        sync_scheduler = SyncScheduler()
        try:
            sync_scheduler.start()
        except Exception:
            logger.warning("Scheduler failed to start", exc_info=True)
            sync_scheduler = None
    else:
        logger.info("Scheduler disabled; syncs run only on demand")
    app.state.scheduler = sync_scheduler

    yield

    # Let an in-flight batch finish before the engine goes away
    if sync_scheduler is not None:
        sync_scheduler.stop()
    dispose_engine()


app = FastAPI(
    title="Finance Tracker",
    description="Personal finance aggregation: balances, transactions and net worth",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router)
app.include_router(link.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(manual_assets.router)
app.include_router(dashboard.router)
app.include_router(sync.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
