"""Standup buffer: a timed window that batches member lines into one message.

A channel is either idle (no ``standups`` row) or active (one row). Lines are
collected in submission order; at ``time_finish`` the window is flushed: if any
lines were sent they are newline-joined and posted as a single message from the
member who started the standup. Flushing deletes the row, so the channel can
start a new standup.

The flush is driven by a Celery task scheduled at start, and is also applied
lazily by every read or write that touches the channel's standup, the channel's
messages or search results. Flushing is idempotent.
"""

import logging
from functools import lru_cache

from celery.result import AsyncResult
from sqlalchemy.orm import Session

from huddle.models.conversation import Conversation
from huddle.models.message import Message
from huddle.models.standup import Standup, StandupLine
from huddle.models.user import User
from huddle.services.errors import InputError
from huddle.services.membership import MembershipService
from huddle.services.messages import MESSAGE_MAX_LENGTH, MessageService
from huddle.utils import unix_now

logger = logging.getLogger(__name__)


class StandupScheduler:
    """Registry of pending flush tasks, keyed by channel id.

    The task runs in a worker process, so its own ``discard`` never reaches
    this registry; finished results are pruned whenever the registry is read
    or written.
    """

    def __init__(self) -> None:
        self._pending: dict[int, AsyncResult] = {}

    def schedule(self, channel_id: int, delay_seconds: int) -> None:
        from huddle.tasks.standup import flush_standup

        self._prune()
        try:
            self._pending[channel_id] = flush_standup.apply_async(
                args=[channel_id], countdown=delay_seconds
            )
        except Exception as e:
            # The lazy flush still closes the window on the next access
            logger.error(f"Failed to schedule standup flush for channel {channel_id}: {e}")

    def discard(self, channel_id: int) -> None:
        self._pending.pop(channel_id, None)

    def cancel(self, channel_id: int) -> None:
        result = self._pending.pop(channel_id, None)
        if result is not None:
            result.revoke()

    def cancel_all(self) -> None:
        for channel_id in list(self._pending):
            self.cancel(channel_id)

    def pending(self) -> list[int]:
        self._prune()
        return sorted(self._pending)

    def _prune(self) -> None:
        for channel_id, result in list(self._pending.items()):
            try:
                done = result.ready()
            except Exception as e:
                logger.warning(f"Could not check flush task for channel {channel_id}: {e}")
                continue
            if done:
                del self._pending[channel_id]


@lru_cache
def get_standup_scheduler() -> StandupScheduler:
    """Get the process-wide scheduler registry."""
    return StandupScheduler()


class StandupService:
    """Service for starting, feeding and flushing channel standups."""

    def __init__(self, db: Session, scheduler: StandupScheduler | None = None):
        self.db = db
        self.scheduler = scheduler
        self.membership = MembershipService(db)

    def get_standup(self, channel: Conversation) -> Standup | None:
        return self.db.query(Standup).filter(Standup.conversation_id == channel.id).first()

    def flush(self, standup: Standup) -> Message | None:
        """Close a window, posting its lines as one message if there are any."""
        return self._flush(standup.id, standup.conversation_id)

    def _flush(self, standup_id: int, channel_id: int) -> Message | None:
        # The Celery task and a lazy flush may race; the channel lock makes the
        # second one see the window already gone
        conversation = self.membership.get_channel(channel_id, lock=True)
        standup = (
            self.db.query(Standup).filter(Standup.id == standup_id).populate_existing().first()
        )
        if standup is None:
            self.db.commit()
            self._discard(channel_id)
            logger.info(f"Standup in channel {channel_id} was already flushed")
            return None

        lines = [
            line.formatted
            for line in self.db.query(StandupLine)
            .filter(StandupLine.standup_id == standup.id)
            .order_by(StandupLine.id)
        ]
        message = None
        if lines:
            message = MessageService(self.db).post(
                conversation, standup.started_by, "\n".join(lines), time_sent=standup.time_finish
            )
        self.db.delete(standup)
        self.db.commit()

        self._discard(channel_id)
        logger.info(f"Flushed standup in channel {channel_id} with {len(lines)} line(s)")
        return message

    def _discard(self, channel_id: int) -> None:
        if self.scheduler is not None:
            self.scheduler.discard(channel_id)

    def flush_if_due(self, channel: Conversation) -> Standup | None:
        """Flush an expired window; return the still-active one, if any."""
        standup = self.get_standup(channel)
        if standup is not None and standup.time_finish <= unix_now():
            self.flush(standup)
            return None
        return standup

    def flush_due(self, channel_ids: list[int] | None = None) -> int:
        """Flush every expired window, optionally limited to some channels."""
        query = self.db.query(Standup).filter(Standup.time_finish <= unix_now())
        if channel_ids is not None:
            query = query.filter(Standup.conversation_id.in_(channel_ids))
        due = [(standup.id, standup.conversation_id) for standup in query.all()]
        for standup_id, channel_id in due:
            self._flush(standup_id, channel_id)
        return len(due)

    def start(self, user: User, channel_id: int, length: int) -> int:
        """Open a window for ``length`` seconds and return its finish time."""
        self.flush_if_due(self.membership.get_channel(channel_id))
        # A flush commits, so the lock is taken after it
        channel = self.membership.get_channel(channel_id, lock=True)
        if self.get_standup(channel) is not None:
            raise InputError("A standup is already active in this channel")
        if length < 0:
            raise InputError("Standup length cannot be negative")
        self.membership.require_member(channel, user)

        time_finish = unix_now() + length
        standup = Standup(conversation_id=channel.id, started_by=user.id, time_finish=time_finish)
        self.db.add(standup)
        self.db.commit()

        if self.scheduler is not None:
            self.scheduler.schedule(channel.id, length)
        logger.info(f"User {user.id} started a {length}s standup in channel {channel.id}")
        return time_finish

    def active(self, user: User, channel_id: int) -> dict:
        channel = self.membership.get_channel(channel_id)
        self.membership.require_member(channel, user)

        standup = self.flush_if_due(channel)
        if standup is None:
            return {"is_active": False, "time_finish": None}
        return {"is_active": True, "time_finish": standup.time_finish}

    def send(self, user: User, channel_id: int, line: str) -> None:
        """Buffer ``<handle>: <line>`` in the channel's active window."""
        channel = self.membership.get_channel(channel_id, lock=True)
        if len(line) > MESSAGE_MAX_LENGTH:
            raise InputError("Message must be at most 1000 characters")
        standup = self.flush_if_due(channel)
        if standup is None:
            raise InputError("No standup is active in this channel")
        self.membership.require_member(channel, user)

        standup.lines.append(StandupLine(handle=user.handle, body=line))
        self.db.commit()
