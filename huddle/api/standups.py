"""Standup API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from huddle.api.dependencies import get_current_user, get_standup_service
from huddle.models.user import User
from huddle.schemas.message import MessageBody
from huddle.schemas.standup import StandupActiveResponse, StandupStart, StandupStartResponse
from huddle.services.standup import StandupService

router = APIRouter(prefix="/api/v1/channels/{channel_id}/standup", tags=["standups"])


@router.post("", response_model=StandupStartResponse, status_code=status.HTTP_201_CREATED)
def start_standup(
    channel_id: int,
    standup_data: StandupStart,
    current_user: Annotated[User, Depends(get_current_user)],
    standups: Annotated[StandupService, Depends(get_standup_service)],
):
    """Start a standup lasting ``length`` seconds."""
    time_finish = standups.start(current_user, channel_id, standup_data.length)
    return StandupStartResponse(time_finish=time_finish)


@router.get("", response_model=StandupActiveResponse)
def get_standup(
    channel_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    standups: Annotated[StandupService, Depends(get_standup_service)],
):
    """Report whether a standup is running in the channel."""
    return standups.active(current_user, channel_id)


@router.post("/messages")
def send_standup_message(
    channel_id: int,
    message_data: MessageBody,
    current_user: Annotated[User, Depends(get_current_user)],
    standups: Annotated[StandupService, Depends(get_standup_service)],
):
    """Add a line to the channel's running standup."""
    standups.send(current_user, channel_id, message_data.message)
    return {}
