"""SQLModel implementation of the vision/milestone repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from ...models.goal import Milestone, Vision
from ...models.habit import Habit
from ...services.progress import HabitSnapshot, MilestoneSnapshot, VisionSnapshot


def _habit_snapshot(habit: Habit) -> HabitSnapshot:
    return HabitSnapshot(
        id=habit.id,  # type: ignore[arg-type]
        title=habit.title,
        frequency_per_week=habit.frequency_per_week,
        created_at=habit.created_at,
        completed_days=sorted(a.occurred_on for a in habit.activities if a.completed),
    )


def _milestone_snapshot(milestone: Milestone) -> MilestoneSnapshot:
    return MilestoneSnapshot(
        id=milestone.id,  # type: ignore[arg-type]
        title=milestone.title,
        status=milestone.status,
        created_at=milestone.created_at,
        target_date=milestone.target_date,
        habits=[_habit_snapshot(h) for h in milestone.habits],
    )


def _vision_snapshot(vision: Vision) -> VisionSnapshot:
    return VisionSnapshot(
        id=vision.id,  # type: ignore[arg-type]
        title=vision.title,
        created_at=vision.created_at,
        updated_at=vision.updated_at,
        target_date=vision.target_date,
        milestones=[_milestone_snapshot(m) for m in vision.milestones],
    )


class SQLModelGoalRepository:
    """Loads visions with milestones, habits and activities in one round of selects."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _vision_query(self, user_id: int):
        return (
            select(Vision)
            .where(Vision.user_id == user_id)
            .options(
                selectinload(Vision.milestones)  # type: ignore[arg-type]
                .selectinload(Milestone.habits)  # type: ignore[arg-type]
                .selectinload(Habit.activities)  # type: ignore[arg-type]
            )
        )

    def create_vision(self, vision: Vision, *, user_id: int) -> Vision:
        with self.session_factory() as session:
            vision.user_id = user_id
            session.add(vision)
            session.commit()
            session.refresh(vision)
            session.expunge(vision)
            return vision

    def create_milestone(self, milestone: Milestone) -> Milestone:
        with self.session_factory() as session:
            session.add(milestone)
            session.commit()
            session.refresh(milestone)
            session.expunge(milestone)
            return milestone

    def list_snapshots(self, *, user_id: int) -> list[VisionSnapshot]:
        with self.session_factory() as session:
            statement = self._vision_query(user_id).order_by(col(Vision.created_at).desc())
            return [_vision_snapshot(v) for v in session.exec(statement).all()]

    def get_snapshot(self, vision_id: int, *, user_id: int) -> Optional[VisionSnapshot]:
        with self.session_factory() as session:
            vision = session.exec(self._vision_query(user_id).where(Vision.id == vision_id)).first()
            return _vision_snapshot(vision) if vision else None

    def latest_snapshot(self, *, user_id: int) -> Optional[VisionSnapshot]:
        with self.session_factory() as session:
            statement = self._vision_query(user_id).order_by(
                col(Vision.updated_at).desc(), col(Vision.id).desc()
            )
            vision = session.exec(statement).first()
            return _vision_snapshot(vision) if vision else None
