# /bmi_ussd/utils/tasks.py

import logging

from bmi_ussd.services.session_store import SessionStore
from bmi_ussd.utils.metrics import sessions_swept_counter

logger = logging.getLogger(__name__)

async def sweep_expired_sessions(store: SessionStore) -> int:
    """
    A scheduled task that removes sessions idle for longer than the idle
    window. Runs independently of request handling; requests also treat an
    expired session as absent, so a late sweep never resumes stale state.
    """
    try:
        removed = await store.sweep()
    except Exception:
        logger.error("An error occurred during the session sweep.", exc_info=True)
        return 0

    if removed:
        sessions_swept_counter.inc(removed)
        logger.info(f"Session sweep removed {removed} expired sessions.")
    return removed
