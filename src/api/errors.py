"""Translation of domain errors into HTTP errors."""

from fastapi import HTTPException, status

from src.core.errors import (
    ConcurrencyConflict,
    DomainError,
    NotFoundError,
    TransitionError,
    ValidationError,
)


def http_error(exc: DomainError) -> HTTPException:
    """Map a domain error onto the matching HTTP status."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        )
    if isinstance(exc, (TransitionError, ConcurrencyConflict)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
