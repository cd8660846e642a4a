"""Search across the messages a user can currently see."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from huddle.models.message import Message
from huddle.models.user import User
from huddle.services.errors import InputError
from huddle.services.membership import MembershipService
from huddle.services.standup import StandupService

QUERY_MAX_LENGTH = 1000


class SearchService:
    """Case-insensitive substring search over the caller's conversations."""

    def __init__(self, db: Session):
        self.db = db
        self.membership = MembershipService(db)

    def search(self, user: User, query: str) -> list[Message]:
        """Matching messages from every channel and DM the user is in, newest id first."""
        if not 1 <= len(query) <= QUERY_MAX_LENGTH:
            raise InputError("Query must be between 1 and 1000 characters")

        conversation_ids = self.membership.conversation_ids_for(user)
        if not conversation_ids:
            return []
        StandupService(self.db).flush_due(conversation_ids)

        return (
            self.db.query(Message)
            .filter(
                Message.conversation_id.in_(conversation_ids),
                func.lower(Message.body).contains(query.lower(), autoescape=True),
            )
            .order_by(Message.id.desc())
            .all()
        )
