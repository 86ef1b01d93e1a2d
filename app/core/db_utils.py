"""
Database utilities for connection management and error handling
"""
import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Any, Tuple, Type, TypeVar, cast, Awaitable

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrentUpdate, StorageFailure

logger = logging.getLogger(__name__)

# Define a type variable for the return type of the decorated function
T = TypeVar('T')

CONNECTION_ERROR_NAMES = (
    "ConnectionError", "OperationalError",
    "ConnectionDoesNotExistError", "ConnectionRefusedError",
)

# Driver messages for a writer that lost a lock race (SQLite, PostgreSQL)
LOCK_CONFLICT_MARKERS = (
    "database is locked",
    "deadlock detected",
    "could not serialize access",
)


def is_lock_conflict(error: DBAPIError) -> bool:
    message = str(error.orig if error.orig is not None else error).lower()
    return any(marker in message for marker in LOCK_CONFLICT_MARKERS)


def _is_retryable(error: Exception, retry_on: Tuple[Type[BaseException], ...]) -> bool:
    if isinstance(error, retry_on):
        return True
    error_name = type(error).__name__
    return any(err in error_name for err in CONNECTION_ERROR_NAMES)


def with_db_retry(
    max_retries: int = 3,
    retry_delay: float = 0.5,
    retry_on: Tuple[Type[BaseException], ...] = (StorageFailure,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator that retries database operations on connection errors and
    optimistic-lock conflicts.

    Args:
        max_retries: Maximum number of retries before giving up
        retry_delay: Base delay between retries in seconds (doubled per attempt)
        retry_on: Exception types that are always retried

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0
            last_error = None

            while retries <= max_retries:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not _is_retryable(e, retry_on):
                        # Not a transient error, re-raise immediately
                        raise
                    retries += 1
                    last_error = e

                    if retries <= max_retries:
                        delay = retry_delay * (2 ** (retries - 1))  # Exponential backoff
                        logger.warning(
                            f"{func.__name__} hit a transient database error: {str(e)}. "
                            f"Retrying in {delay:.2f}s... (Attempt {retries}/{max_retries})"
                        )
                        await asyncio.sleep(delay)

            # If we get here, we've exhausted all retries
            logger.error(f"{func.__name__} failed after {max_retries} retries: {last_error}")
            if isinstance(last_error, StorageFailure):
                raise last_error
            raise StorageFailure(f"{func.__name__} failed after {max_retries} retries") from last_error

        return cast(Callable[..., Awaitable[T]], wrapper)

    return decorator


@asynccontextmanager
async def storage_errors(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """
    Translate SQLAlchemy failures raised inside the block into StorageFailure,
    rolling the session back first so it can be reused. Version mismatches
    and lost lock races become ConcurrentUpdate.
    """
    try:
        yield
    except StaleDataError as e:
        await db.rollback()
        raise ConcurrentUpdate(f"{operation}: row was modified concurrently") from e
    except DBAPIError as e:
        await db.rollback()
        if is_lock_conflict(e):
            logger.warning(f"Lock conflict during {operation}: {str(e.orig)}")
            raise ConcurrentUpdate(f"{operation}: row is locked by another writer") from e
        logger.error(f"Storage failure during {operation}: {str(e)}")
        raise StorageFailure(f"{operation} failed: {str(e)}") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Storage failure during {operation}: {str(e)}")
        raise StorageFailure(f"{operation} failed: {str(e)}") from e
