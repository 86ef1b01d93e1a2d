"""
Tests for milestone creation, contributions and completion.
"""
import asyncio
import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.core.errors import (
    AlreadyCompleted,
    InvalidAmount,
    InvalidName,
    InvalidOwner,
    InvalidStartDate,
    InvalidTargetAmount,
    MilestoneNotFound,
)
from app.crud import milestone as milestone_crud
from app.models.milestone import MilestoneStatus
from app.schemas.milestone import MilestoneCreate
from app.utils import milestones as engine


def build(account_id, **overrides):
    fields = dict(
        user_id=account_id,
        name="New Bike",
        target_amount=Decimal("200.00"),
        start_date=date(2024, 1, 15),
    )
    fields.update(overrides)
    return MilestoneCreate(**fields)


class TestMilestoneCreation:
    """Tests for engine.create_milestone"""

    async def test_create_defaults(self, db, account):
        """A new milestone starts active with nothing saved"""
        milestone = await engine.create_milestone(build(account.id), db)

        assert milestone.id is not None
        assert milestone.user_id == account.id
        assert milestone.name == "New Bike"
        assert milestone.target_amount == Decimal("200.00")
        assert milestone.saved_amount == Decimal("0")
        assert milestone.status == MilestoneStatus.active
        assert milestone.completion_date is None

    async def test_name_is_trimmed(self, db, account):
        milestone = await engine.create_milestone(build(account.id, name="  Laptop  "), db)
        assert milestone.name == "Laptop"

    async def test_start_date_today_is_accepted(self, db, account):
        milestone = await engine.create_milestone(build(account.id, start_date=date.today()), db)
        assert milestone.start_date == date.today()

    async def test_initial_saved_amount(self, db, account):
        milestone = await engine.create_milestone(build(account.id, saved_amount=Decimal("50.00")), db)
        assert milestone.saved_amount == Decimal("50.00")
        assert milestone.status == MilestoneStatus.active

    async def test_initial_saved_amount_must_be_below_target(self, db, account):
        with pytest.raises(InvalidAmount) as exc_info:
            await engine.create_milestone(build(account.id, saved_amount=Decimal("200.00")), db)
        assert "already complete" in exc_info.value.message

    async def test_missing_owner(self, db):
        with pytest.raises(InvalidOwner):
            await engine.create_milestone(build(None), db)

    async def test_unknown_owner(self, db):
        with pytest.raises(InvalidOwner):
            await engine.create_milestone(build(uuid.uuid4()), db)

    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_blank_name(self, db, account, name):
        with pytest.raises(InvalidName):
            await engine.create_milestone(build(account.id, name=name), db)

    @pytest.mark.parametrize("target", [None, Decimal("0"), Decimal("-5.00"), Decimal("10.001")])
    async def test_invalid_target(self, db, account, target):
        with pytest.raises(InvalidTargetAmount):
            await engine.create_milestone(build(account.id, target_amount=target), db)

    async def test_missing_start_date(self, db, account):
        with pytest.raises(InvalidStartDate):
            await engine.create_milestone(build(account.id, start_date=None), db)

    async def test_future_start_date(self, db, account):
        tomorrow = date.today() + timedelta(days=1)
        with pytest.raises(InvalidStartDate):
            await engine.create_milestone(build(account.id, start_date=tomorrow), db)

    async def test_validation_order(self, db, account):
        """Name is checked before target, target before start date"""
        with pytest.raises(InvalidName):
            await engine.create_milestone(
                build(account.id, name="", target_amount=Decimal("0"), start_date=None), db
            )
        with pytest.raises(InvalidTargetAmount):
            await engine.create_milestone(build(account.id, target_amount=Decimal("0"), start_date=None), db)


class TestContributions:
    """Tests for engine.update_saved_amount_and_check_completion"""

    async def test_partial_then_exact_completion(self, db, milestone):
        milestone_id = milestone.id

        updated = await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("150.00"), db)
        assert updated.saved_amount == Decimal("150.00")
        assert updated.status == MilestoneStatus.active
        assert updated.completion_date is None

        updated = await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("50.00"), db)
        assert updated.saved_amount == Decimal("200.00")
        assert updated.status == MilestoneStatus.completed
        assert updated.completion_date == date.today()

    async def test_overshoot_is_rejected_and_nothing_changes(self, db, milestone):
        milestone_id = milestone.id
        await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("150.00"), db)

        with pytest.raises(InvalidAmount):
            await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("100.00"), db)

        stored = await milestone_crud.get_milestone_by_id(milestone_id, db)
        assert stored.saved_amount == Decimal("150.00")
        assert stored.status == MilestoneStatus.active
        assert stored.completion_date is None

    @pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("-10.00"), Decimal("0.001")])
    async def test_non_positive_amount_is_rejected(self, db, milestone, amount):
        milestone_id = milestone.id
        with pytest.raises(InvalidAmount):
            await engine.update_saved_amount_and_check_completion(milestone_id, amount, db)

        stored = await milestone_crud.get_milestone_by_id(milestone_id, db)
        assert stored.saved_amount == Decimal("0")

    async def test_unknown_milestone(self, db):
        with pytest.raises(MilestoneNotFound):
            await engine.update_saved_amount_and_check_completion(uuid.uuid4(), Decimal("10.00"), db)

    async def test_completed_milestone_rejects_further_contributions(self, db, milestone):
        milestone_id = milestone.id
        await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("200.00"), db)

        with pytest.raises(InvalidAmount):
            await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("0.01"), db)

    async def test_decimal_amounts_are_exact(self, db, account):
        milestone = await engine.create_milestone(build(account.id, target_amount=Decimal("0.30")), db)
        milestone_id = milestone.id

        await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("0.10"), db)
        updated = await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("0.20"), db)

        assert updated.saved_amount == Decimal("0.30")
        assert updated.status == MilestoneStatus.completed

    async def test_concurrent_contributions_never_overshoot(self, session_factory, milestone):
        """Two 120.00 contributions race against a 200.00 target: exactly one lands"""
        milestone_id = milestone.id

        async def contribute():
            async with session_factory() as session:
                return await engine.update_saved_amount_and_check_completion(
                    milestone_id, Decimal("120.00"), session
                )

        results = await asyncio.gather(contribute(), contribute(), return_exceptions=True)

        accepted = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, Exception)]
        assert len(accepted) == 1
        assert len(rejected) == 1
        assert isinstance(rejected[0], InvalidAmount)

        async with session_factory() as session:
            stored = await milestone_crud.get_milestone_by_id(milestone_id, session)
        assert stored.saved_amount == Decimal("120.00")
        assert stored.status == MilestoneStatus.active


class TestManualCompletion:
    """Tests for engine.mark_milestone_as_completed"""

    async def test_completes_below_target(self, db, milestone):
        milestone_id = milestone.id
        await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("20.00"), db)

        completed = await engine.mark_milestone_as_completed(milestone_id, db)

        assert completed.status == MilestoneStatus.completed
        assert completed.completion_date == date.today()
        assert completed.saved_amount == Decimal("20.00")

    async def test_already_completed(self, db, milestone, monkeypatch):
        milestone_id = milestone.id
        first_day = date(2024, 3, 1)
        monkeypatch.setattr(engine, "today", lambda: first_day)
        await engine.mark_milestone_as_completed(milestone_id, db)

        monkeypatch.setattr(engine, "today", lambda: date(2024, 3, 2))
        with pytest.raises(AlreadyCompleted):
            await engine.mark_milestone_as_completed(milestone_id, db)

        stored = await milestone_crud.get_milestone_by_id(milestone_id, db)
        assert stored.completion_date == first_day

    async def test_unknown_milestone(self, db):
        with pytest.raises(MilestoneNotFound):
            await engine.mark_milestone_as_completed(uuid.uuid4(), db)


class TestProgress:
    """Tests for engine.calculate_progress"""

    async def test_progress_figures(self, db, milestone):
        milestone_id = milestone.id
        updated = await engine.update_saved_amount_and_check_completion(milestone_id, Decimal("50.00"), db)

        progress = engine.calculate_progress(updated)

        assert progress.milestone_id == milestone_id
        assert progress.remaining_amount == Decimal("150.00")
        assert progress.progress_percentage == Decimal("25.00")
        assert progress.status == MilestoneStatus.active
