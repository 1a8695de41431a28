"""
User-facing error messages and HTTPException helpers.

Messages use sentence case and end with a period when they are full
sentences. Log messages are written separately at the call site and may carry
ids that are not shown to clients.

Usage:
    from talentproof.core.error_responses import ErrorMessages, raise_not_found

    if questions is None:
        raise_not_found(ErrorMessages.QUIZ_SESSION_NOT_FOUND)
"""
from typing import NoReturn

from fastapi import HTTPException, status


class ErrorMessages:
    """Error messages returned in response bodies."""

    # 404: unknown, expired or evicted sessions are indistinguishable to clients
    QUIZ_SESSION_NOT_FOUND = "Quiz session not found."

    # 500: paired with an error_id in the response
    INTERNAL_ERROR = "Internal server error"


def raise_not_found(detail: str) -> NoReturn:
    """Abort the request with 404 and the given message."""
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
