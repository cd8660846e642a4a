"""Standup schemas."""

from pydantic import BaseModel


class StandupStart(BaseModel):
    """Start a standup lasting ``length`` seconds."""

    length: int


class StandupStartResponse(BaseModel):
    """When the new standup closes."""

    time_finish: int


class StandupActiveResponse(BaseModel):
    """Whether a standup is running and when it closes."""

    is_active: bool
    time_finish: int | None
