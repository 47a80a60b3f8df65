"""Tests for habit lifecycle operations and streak cache upkeep."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from pathwise.errors import HabitCompletionBlocked, NotFoundError
from pathwise.infra.repositories import (
    SQLModelCompletionRepository,
    SQLModelHabitRepository,
    SQLModelTaskRepository,
)
from pathwise.models import TaskStatus
from pathwise.services.habits import HabitService
from pathwise.services.streaks import current_habit_streak

NOW = datetime(2024, 7, 10, 18, 0)
TODAY = NOW.date()


@pytest.fixture
def service(session_factory) -> HabitService:
    return HabitService(
        SQLModelHabitRepository(session_factory),
        SQLModelTaskRepository(session_factory),
        SQLModelCompletionRepository(session_factory),
    )


def _past_days(count: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in range(1, count + 1)]


class TestToggleCompletedToday:
    def test_completing_extends_streak(self, service, habit_factory, activity_factory, user):
        habit = habit_factory()
        activity_factory(habit, _past_days(3))

        updated = service.toggle_completed_today(habit.id, user.id, now=NOW)

        assert updated.completed_today is True
        assert updated.last_completed_at == NOW
        assert updated.streak == 4
        assert len(service.completion_repo.list_for_habit(habit.id)) == 1

    def test_toggle_on_then_off_matches_recompute(self, service, habit_factory, activity_factory, user):
        habit = habit_factory()
        activity_factory(habit, _past_days(2))

        service.toggle_completed_today(habit.id, user.id, now=NOW)
        updated = service.toggle_completed_today(habit.id, user.id, now=NOW)

        activities = service.habit_repo.list_activities(habit.id)
        assert updated.completed_today is False
        assert updated.streak == 2
        assert updated.streak == current_habit_streak(activities, today=TODAY)
        assert service.completion_repo.list_for_habit(habit.id) == []

    def test_uncompleting_reopens_linked_tasks(self, service, habit_factory, task_factory, user):
        habit = habit_factory()
        task_factory(habit=habit, status=TaskStatus.COMPLETED, created_at=NOW - timedelta(hours=2))

        service.toggle_completed_today(habit.id, user.id, now=NOW)
        service.toggle_completed_today(habit.id, user.id, now=NOW)

        tasks = service.task_repo.list_for_habit(habit.id)
        assert [t.status for t in tasks] == [TaskStatus.PENDING]
        assert tasks[0].completed_at is None

    def test_open_task_today_blocks_manual_completion(self, service, habit_factory, task_factory, user):
        habit = habit_factory()
        task_factory(habit=habit, created_at=NOW - timedelta(hours=1))

        assert service.can_manually_complete(habit.id, user.id, now=NOW) is False
        with pytest.raises(HabitCompletionBlocked):
            service.toggle_completed_today(habit.id, user.id, now=NOW)

    def test_open_task_from_yesterday_does_not_block(self, service, habit_factory, task_factory, user):
        habit = habit_factory()
        task_factory(habit=habit, created_at=NOW - timedelta(days=1))

        assert service.toggle_completed_today(habit.id, user.id, now=NOW).completed_today is True

    def test_other_users_habit_is_not_found(self, service, habit_factory, user, other_user):
        habit = habit_factory(owner=other_user)

        with pytest.raises(NotFoundError):
            service.toggle_completed_today(habit.id, user.id, now=NOW)

    def test_stale_flag_from_yesterday_counts_as_open(self, service, habit_factory, user):
        habit = habit_factory()
        service.toggle_completed_today(habit.id, user.id, now=NOW - timedelta(days=1))

        updated = service.toggle_completed_today(habit.id, user.id, now=NOW)

        assert updated.completed_today is True
        assert updated.streak == 2


class TestAutoComplete:
    def test_completes_when_all_todays_tasks_done(self, service, habit_factory, task_factory):
        habit = habit_factory()
        task_factory(habit=habit, status=TaskStatus.COMPLETED, created_at=NOW - timedelta(hours=3))

        assert service.check_and_auto_complete(habit.id, now=NOW) is True
        assert service.habit_repo.get_by_id(habit.id).streak == 1
        assert service.check_and_auto_complete(habit.id, now=NOW) is False

    def test_open_task_prevents_auto_completion(self, service, habit_factory, task_factory):
        habit = habit_factory()
        task_factory(habit=habit, created_at=NOW - timedelta(hours=3))

        assert service.check_and_auto_complete(habit.id, now=NOW) is False

    def test_missing_habit_returns_false(self, service):
        assert service.check_and_auto_complete(404, now=NOW) is False


class TestCacheMaintenance:
    def test_resync_is_idempotent(self, service, habit_factory, activity_factory):
        habit = habit_factory()
        activity_factory(habit, [TODAY, *_past_days(4)])

        first = service.resync_habit_streak(habit.id, today=TODAY)
        second = service.resync_habit_streak(habit.id, today=TODAY)

        assert first == second == 5
        assert service.habit_repo.get_by_id(habit.id).streak == 5

    def test_resync_all(self, service, habit_factory, activity_factory, other_user):
        mine = habit_factory()
        theirs = habit_factory(owner=other_user)
        activity_factory(mine, _past_days(2))

        assert service.resync_all_habit_streaks(today=TODAY) == {mine.id: 2, theirs.id: 0}

    def test_resync_missing_habit_raises(self, service):
        with pytest.raises(NotFoundError):
            service.resync_habit_streak(12345)

    def test_reset_stale_completed_today(self, service, habit_factory, user):
        stale = habit_factory(title="stale")
        fresh = habit_factory(title="fresh")
        service.toggle_completed_today(stale.id, user.id, now=NOW - timedelta(days=1))
        service.toggle_completed_today(fresh.id, user.id, now=NOW)

        assert service.reset_stale_completed_today(today=TODAY) == 1
        assert service.habit_repo.get_by_id(stale.id).completed_today is False
        assert service.habit_repo.get_by_id(fresh.id).completed_today is True


class TestFrequencyAndReads:
    def test_change_frequency_clears_history(self, service, habit_factory, activity_factory, user):
        habit = habit_factory()
        activity_factory(habit, _past_days(5))
        service.toggle_completed_today(habit.id, user.id, now=NOW)

        updated = service.change_frequency(habit.id, user.id, 3)

        assert updated.frequency_per_week == 3
        assert updated.streak == 0
        assert updated.completed_today is False
        assert updated.last_completed_at is None
        assert service.habit_repo.list_activities(habit.id) == []

    @pytest.mark.parametrize("frequency", [0, 8])
    def test_change_frequency_validates_range(self, service, habit_factory, user, frequency):
        habit = habit_factory()

        with pytest.raises(ValueError):
            service.change_frequency(habit.id, user.id, frequency)

    def test_create_habit_validates_frequency(self, service, user):
        with pytest.raises(ValueError):
            service.create_habit(user_id=user.id, title="x", frequency_per_week=9)
        assert service.create_habit(user_id=user.id, title=" Read ").title == "Read"

    def test_activity_window_is_zero_filled(self, service, habit_factory, activity_factory, user):
        habit = habit_factory()
        activity_factory(habit, [TODAY - timedelta(days=2)])

        window = service.habit_activity_window(habit.id, user.id, days=3, today=TODAY)

        assert window == [
            {"date": (TODAY - timedelta(days=2)).isoformat(), "completed": True},
            {"date": (TODAY - timedelta(days=1)).isoformat(), "completed": False},
            {"date": TODAY.isoformat(), "completed": False},
        ]

    def test_summary_counts(self, service, habit_factory, user):
        first = habit_factory()
        habit_factory(is_active=False)
        service.toggle_completed_today(first.id, user.id, now=NOW)

        assert service.best_cached_streak(user.id) == 1
        assert service.completed_today_count(user.id, today=TODAY) == 1
        assert service.total_active_habits(user.id) == 1


class TestActiveFlagAndDeletion:
    def test_toggle_active_flips_flag(self, service, habit_factory, user):
        habit = habit_factory()

        assert service.toggle_active(habit.id, user.id).is_active is False
        assert service.total_active_habits(user.id) == 0
        assert service.toggle_active(habit.id, user.id).is_active is True

    def test_toggle_active_requires_owner(self, service, habit_factory, user, other_user):
        habit = habit_factory(owner=other_user)

        with pytest.raises(NotFoundError):
            service.toggle_active(habit.id, user.id)

    def test_delete_keeps_tasks_as_standalone(
        self, service, habit_factory, activity_factory, task_factory, user
    ):
        habit = habit_factory()
        activity_factory(habit, _past_days(2))
        task = task_factory(habit=habit, created_at=NOW - timedelta(days=1))
        service.toggle_completed_today(habit.id, user.id, now=NOW)

        assert service.delete_habit(habit.id, user.id) == 1

        assert service.habit_repo.get_by_id(habit.id) is None
        assert service.habit_repo.list_activities(habit.id) == []
        assert service.completion_repo.list_for_habit(habit.id) == []
        kept = service.task_repo.get_by_id(task.id, user_id=user.id)
        assert kept is not None
        assert kept.habit_id is None

    def test_delete_requires_owner(self, service, habit_factory, user, other_user):
        habit = habit_factory(owner=other_user)

        with pytest.raises(NotFoundError):
            service.delete_habit(habit.id, user.id)
        assert service.habit_repo.get_by_id(habit.id) is not None
