# /bmi_ussd/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from bmi_ussd.config.settings import settings
from bmi_ussd.services.navigator import SessionNavigator
from bmi_ussd.services.result_log import MongoResultLog, create_result_log
from bmi_ussd.services.session_store import create_session_store
from bmi_ussd.services.string_service import string_service
from bmi_ussd.utils.logging import setup_logging
from bmi_ussd.utils.tasks import sweep_expired_sessions

# This file manages the application's lifespan: it builds the session store,
# the result log and the navigator, schedules the session sweep, and releases
# connections on shutdown.

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info("Application starting up...")

    string_service.load_strings(settings.strings_override_path)

    store = create_session_store(settings)
    result_log = create_result_log(settings)
    if isinstance(result_log, MongoResultLog):
        try:
            await result_log.create_indexes()
        except Exception as e:
            logger.error(f"Could not create result log indexes: {e}")

    app.state.session_store = store
    app.state.result_log = result_log
    app.state.navigator = SessionNavigator(store, result_log, string_service, settings)

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        sweep_expired_sessions,
        'interval',
        seconds=settings.sweep_interval_seconds,
        args=[store],
        id="session_sweep_job",
        replace_existing=True
    )
    scheduler.start()
    logger.info(f"Scheduled job: sweep_expired_sessions (every {settings.sweep_interval_seconds} seconds).")

    logger.info("Application startup complete. Ready to accept requests.")

    yield  # Application is now running

    logger.info("Application shutting down...")

    scheduler.shutdown(wait=False)
    if result_log is not None:
        await result_log.close()
    redis_client = getattr(store, "redis", None)
    if redis_client is not None:
        await redis_client.aclose()
