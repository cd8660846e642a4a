"""Search API endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from huddle.api.dependencies import get_current_user, get_search_service
from huddle.models.user import User
from huddle.schemas.message import MessageResponse, SearchResponse
from huddle.services.search import SearchService

router = APIRouter(prefix="/api/v1/search", tags=["search"])


@router.get("", response_model=SearchResponse)
def search_messages(
    current_user: Annotated[User, Depends(get_current_user)],
    search: Annotated[SearchService, Depends(get_search_service)],
    query: str = Query(default=""),
):
    """Find messages containing ``query`` (case-insensitive) in the caller's channels and DMs."""
    messages = search.search(current_user, query)
    return SearchResponse(
        messages=[MessageResponse.from_message(m, current_user.id) for m in messages]
    )
