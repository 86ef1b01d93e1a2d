"""
Tests for the retry decorator, storage error translation and argument parsing.
"""
import uuid
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from app.core.db_utils import storage_errors, with_db_retry
from app.core.errors import (
    ConcurrentUpdate,
    InvalidAmount,
    InvalidArgument,
    StorageFailure,
)
from app.models.milestone import MilestoneStatus
from app.utils.parsing import is_positive_money, is_valid_money, parse_date, parse_status, parse_uuid


class FakeSession:
    def __init__(self):
        self.rollbacks = 0

    async def rollback(self):
        self.rollbacks += 1


class TestWithDbRetry:
    """Tests for the with_db_retry decorator"""

    async def test_retries_until_success(self):
        calls = []

        @with_db_retry(max_retries=3, retry_delay=0, retry_on=(ConcurrentUpdate,))
        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConcurrentUpdate("conflict")
            return "done"

        assert await flaky() == "done"
        assert len(calls) == 3

    async def test_gives_up_after_max_retries(self):
        calls = []

        @with_db_retry(max_retries=2, retry_delay=0, retry_on=(ConcurrentUpdate,))
        async def always_conflicts():
            calls.append(1)
            raise ConcurrentUpdate("conflict")

        with pytest.raises(ConcurrentUpdate):
            await always_conflicts()
        assert len(calls) == 3

    async def test_domain_errors_are_not_retried(self):
        calls = []

        @with_db_retry(max_retries=3, retry_delay=0, retry_on=(ConcurrentUpdate,))
        async def rejected():
            calls.append(1)
            raise InvalidAmount("too much")

        with pytest.raises(InvalidAmount):
            await rejected()
        assert len(calls) == 1

    async def test_storage_failure_not_retried_when_not_listed(self):
        calls = []

        @with_db_retry(max_retries=3, retry_delay=0, retry_on=(ConcurrentUpdate,))
        async def broken():
            calls.append(1)
            raise StorageFailure("disk full")

        with pytest.raises(StorageFailure):
            await broken()
        assert len(calls) == 1

    async def test_connection_errors_are_wrapped(self):
        @with_db_retry(max_retries=1, retry_delay=0)
        async def offline():
            raise ConnectionRefusedError("no server")

        with pytest.raises(StorageFailure) as exc_info:
            await offline()
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)


class TestStorageErrors:
    """Tests for the storage_errors context manager"""

    async def test_stale_data_becomes_concurrent_update(self):
        db = FakeSession()
        with pytest.raises(ConcurrentUpdate):
            async with storage_errors(db, "contribution"):
                raise StaleDataError("version mismatch")
        assert db.rollbacks == 1

    async def test_locked_database_becomes_concurrent_update(self):
        db = FakeSession()
        with pytest.raises(ConcurrentUpdate):
            async with storage_errors(db, "contribution"):
                raise OperationalError("UPDATE milestones", {}, Exception("database is locked"))
        assert db.rollbacks == 1

    async def test_other_database_errors_become_storage_failure(self):
        db = FakeSession()
        with pytest.raises(StorageFailure) as exc_info:
            async with storage_errors(db, "lookup"):
                raise IntegrityError("INSERT", {}, Exception("constraint failed"))
        assert not isinstance(exc_info.value, ConcurrentUpdate)
        assert exc_info.value.retryable
        assert db.rollbacks == 1

    async def test_domain_errors_pass_through(self):
        db = FakeSession()
        with pytest.raises(InvalidAmount):
            async with storage_errors(db, "contribution"):
                raise InvalidAmount("too much")
        assert db.rollbacks == 0


class TestParsing:
    """Tests for argument and money parsing"""

    def test_parse_uuid(self):
        value = uuid.uuid4()
        assert parse_uuid(value) == value
        assert parse_uuid(f" {value} ") == value
        with pytest.raises(InvalidArgument):
            parse_uuid("123")
        with pytest.raises(InvalidArgument):
            parse_uuid(None)

    def test_parse_date(self):
        assert parse_date("2024-03-10") == date(2024, 3, 10)
        assert parse_date(date(2024, 3, 10)) == date(2024, 3, 10)
        with pytest.raises(InvalidArgument):
            parse_date("2024-13-01")

    def test_parse_status(self):
        assert parse_status("Completed") == MilestoneStatus.completed
        assert parse_status(MilestoneStatus.active) == MilestoneStatus.active
        with pytest.raises(InvalidArgument):
            parse_status("archived")

    def test_money(self):
        assert is_valid_money(Decimal("0"))
        assert is_valid_money(Decimal("12.50"))
        assert is_valid_money(Decimal("1.500"))
        assert not is_valid_money(Decimal("1.505"))
        assert not is_valid_money(Decimal("-0.01"))
        assert not is_valid_money(Decimal("NaN"))
        assert not is_valid_money(Decimal("100000000"))
        assert not is_valid_money(None)

        assert is_positive_money(Decimal("0.01"))
        assert not is_positive_money(Decimal("0"))
