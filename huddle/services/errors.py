"""Error kinds raised by the service layer.

Both are ``HTTPException`` subclasses so FastAPI renders them directly; the
status code carries the kind.
"""

from fastapi import HTTPException, status


class InputError(HTTPException):
    """Malformed or semantically invalid arguments."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AccessError(HTTPException):
    """Unresolvable token, or caller lacks permission for the target."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
