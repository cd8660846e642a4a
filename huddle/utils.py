"""Small shared helpers."""

from datetime import UTC, datetime


def unix_now() -> int:
    """Current time as whole unix seconds."""
    return int(datetime.now(UTC).timestamp())
