# app/core/errors.py
"""
Domain errors raised by the milestone engine, the savings ledger and the
account directory. Each error carries the HTTP status the API layer maps it
to and a stable ``code`` used in error responses.
"""
from fastapi import status


class SavingsAppError(Exception):
    """Base class for all domain errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    retryable: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or ""

    @property
    def code(self) -> str:
        return self.__class__.__name__


# Validation failures (non-retryable)

class InvalidOwner(SavingsAppError):
    """Owner account is missing or does not exist."""


class InvalidName(SavingsAppError):
    """Milestone name cannot be empty."""


class InvalidTargetAmount(SavingsAppError):
    """Target amount must be greater than zero."""


class InvalidStartDate(SavingsAppError):
    """Start date is missing or in the future."""


class InvalidDate(SavingsAppError):
    """Date is missing or in the future."""


class InvalidAmount(SavingsAppError):
    """Amount is not positive or exceeds the milestone target."""


class InvalidArgument(SavingsAppError):
    """A query argument could not be parsed."""


class InvalidAccount(SavingsAppError):
    """Account details are incomplete or malformed."""


class InvalidRelationship(SavingsAppError):
    """Parent/child link is not valid for the given accounts."""


# Lookup and state conflicts

class NotFound(SavingsAppError):
    """Requested record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class MilestoneNotFound(NotFound):
    """Milestone does not exist."""


class AlreadyCompleted(SavingsAppError):
    """Milestone is already marked as completed."""
    status_code = status.HTTP_409_CONFLICT


class DuplicateEmail(SavingsAppError):
    """An account with this email already exists."""
    status_code = status.HTTP_409_CONFLICT


class InvalidCredentials(SavingsAppError):
    """Email or password is incorrect."""
    status_code = status.HTTP_403_FORBIDDEN


# Storage layer

class StorageFailure(SavingsAppError):
    """The storage backend failed; the operation may be retried."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True


class ConcurrentUpdate(StorageFailure):
    """The row changed underneath a read-modify-write."""
