"""Session cleanup scheduled job.

Expired sessions are already ignored and removed when a browser presents
them; this job removes the ones nobody comes back for.

Usage:
    python manage.py purge-sessions

Or call directly:
    from passgate.jobs.session_cleanup_job import purge_expired_sessions
    purge_expired_sessions()
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from passgate.exceptions.base import StorageError
from passgate.services.session_store import get_session_store

logger = logging.getLogger(__name__)


def purge_expired_sessions() -> Dict[str, Any]:
    """Remove expired sessions from the configured session store.

    Returns:
        Dictionary with job execution statistics:
        - started_at: ISO timestamp of the run
        - purged_count: Number of sessions removed
        - errors: Error messages, if the store failed
    """
    started_at = datetime.now(timezone.utc)
    stats = {
        "started_at": started_at.isoformat(),
        "purged_count": 0,
        "errors": [],
    }

    store = get_session_store()
    logger.info(f"Starting session cleanup job with {type(store).__name__}")

    try:
        stats["purged_count"] = store.purge_expired()
    except StorageError as e:
        logger.error(f"Session cleanup job failed: {e}")
        stats["errors"].append(str(e))

    return stats
