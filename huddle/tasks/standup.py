"""Celery tasks for closing standup windows."""

import logging

from huddle.celery_app import app as celery_app
from huddle.database import SessionLocal
from huddle.models.standup import Standup
from huddle.services.standup import StandupService
from huddle.utils import unix_now

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=5)
def flush_standup(self, channel_id: int) -> dict:
    """Flush a channel's standup once its window has closed.

    Args:
        channel_id: ID of the channel whose standup should be flushed

    Returns:
        dict with the flush result
    """
    db = SessionLocal()
    try:
        standup = db.query(Standup).filter(Standup.conversation_id == channel_id).first()
        if not standup:
            # Already flushed lazily by a request
            return {"channel_id": channel_id, "flushed": False}

        remaining = standup.time_finish - unix_now()
        if remaining > 0:
            logger.info(f"Standup in channel {channel_id} still open, retrying in {remaining}s")
            raise self.retry(countdown=remaining)

        message = StandupService(db).flush(standup)
        return {
            "channel_id": channel_id,
            "flushed": True,
            "message_id": message.id if message else None,
        }
    finally:
        db.close()
