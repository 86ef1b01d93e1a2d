# app/utils/parsing.py
"""Parsing of raw query arguments and money values shared by the engine."""
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from app.core.errors import InvalidArgument
from app.models.milestone import MilestoneStatus

# NUMERIC(10, 2)
MONEY_PLACES = 2
MONEY_LIMIT = Decimal("100000000")


def parse_uuid(value: Any, field: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise InvalidArgument(f"Invalid {field}: {value}")


def parse_date(value: Any, field: str = "date") -> date:
    """Accept a date or an ISO-8601 ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(f"Invalid {field}: {value}")


def parse_status(value: Any) -> MilestoneStatus:
    """Map a status label onto the closed MilestoneStatus enum."""
    if isinstance(value, MilestoneStatus):
        return value
    try:
        return MilestoneStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(f"Invalid status: {value}")


def is_valid_money(value: Optional[Decimal]) -> bool:
    """True for finite, non-negative amounts that fit NUMERIC(10, 2) exactly."""
    if value is None:
        return False
    try:
        if not value.is_finite() or value < 0 or value >= MONEY_LIMIT:
            return False
        return value.normalize().as_tuple().exponent >= -MONEY_PLACES
    except (InvalidOperation, AttributeError):
        return False


def is_positive_money(value: Optional[Decimal]) -> bool:
    return is_valid_money(value) and value > 0
