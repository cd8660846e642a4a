"""Message schemas."""

from pydantic import BaseModel

from huddle.models.message import Message


class MessageBody(BaseModel):
    """A message body sent or edited by the caller."""

    message: str


class ReactRequest(BaseModel):
    """React or unreact to a message."""

    react_id: int


class MessageShare(BaseModel):
    """Share a message to a channel or a DM (the unused target is -1)."""

    og_message_id: int
    message: str = ""
    channel_id: int = -1
    dm_id: int = -1


class MessageIdResponse(BaseModel):
    """Id of a newly created message."""

    message_id: int


class ReactResponse(BaseModel):
    """Users who reacted with one reaction, from the viewer's perspective."""

    react_id: int
    user_ids: list[int]
    is_this_user_reacted: bool


class MessageResponse(BaseModel):
    """A message as seen by a particular viewer."""

    message_id: int
    user_id: int
    message: str
    time_sent: int
    reacts: list[ReactResponse]
    is_pinned: bool

    @classmethod
    def from_message(cls, message: Message, viewer_id: int) -> "MessageResponse":
        by_react: dict[int, list[int]] = {}
        for react in message.reacts:
            by_react.setdefault(react.react_id, []).append(react.user_id)

        return cls(
            message_id=message.id,
            user_id=message.sender_id,
            message=message.body,
            time_sent=message.time_sent,
            reacts=[
                ReactResponse(
                    react_id=react_id,
                    user_ids=user_ids,
                    is_this_user_reacted=viewer_id in user_ids,
                )
                for react_id, user_ids in sorted(by_react.items())
            ],
            is_pinned=message.is_pinned,
        )


class MessagePageResponse(BaseModel):
    """A page of messages, newest first."""

    messages: list[MessageResponse]
    start: int
    end: int


class SearchResponse(BaseModel):
    """Search results."""

    messages: list[MessageResponse]
