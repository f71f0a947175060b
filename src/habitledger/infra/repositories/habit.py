"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import HabitAlreadyCompleted, InvalidHabitIds
from ...models.habit import Habit, HabitCompletion, is_storable_id
from ..database import SessionFactory


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID, scoped to its owner."""
        if not (is_storable_id(habit_id) and is_storable_id(user_id)):
            return None
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, *, user_id: int, is_active: bool | None = None) -> list[Habit]:
        """List a user's habits by sort index, newest first among ties."""
        with self.session_factory() as session:
            statement = select(Habit).where(Habit.user_id == user_id)
            if is_active is not None:
                statement = statement.where(Habit.is_active == is_active)
            statement = statement.order_by(
                Habit.sort_order.asc(),  # type: ignore[attr-defined]
                Habit.created_at.desc(),  # type: ignore[attr-defined]
                Habit.id.desc(),  # type: ignore[union-attr]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_ids(self, *, user_id: int) -> list[int]:
        if not is_storable_id(user_id):
            return []
        with self.session_factory() as session:
            return list(session.exec(select(Habit.id).where(Habit.user_id == user_id)).all())

    def max_sort_order(self, *, user_id: int) -> Optional[int]:
        if not is_storable_id(user_id):
            return None
        with self.session_factory() as session:
            return session.exec(
                select(func.max(Habit.sort_order)).where(Habit.user_id == user_id)
            ).one()

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit = session.merge(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit by ID; its completions go with it."""
        if not (is_storable_id(habit_id) and is_storable_id(user_id)):
            return False
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True

    def apply_sort_order(
        self, ordered_ids: Sequence[int], *, user_id: int, updated_at: datetime
    ) -> None:
        """Re-sequence the listed habits atomically.

        Ownership is re-checked inside the transaction so that a habit deleted
        or foreign to ``user_id`` aborts the whole reorder.
        """
        if not all(is_storable_id(habit_id) for habit_id in ordered_ids):
            raise InvalidHabitIds()
        with self.session_factory() as session:
            habits = session.exec(
                select(Habit).where(
                    Habit.user_id == user_id,
                    Habit.id.in_(list(ordered_ids)),  # type: ignore[union-attr]
                )
            ).all()
            by_id = {habit.id: habit for habit in habits}
            if len(by_id) != len(ordered_ids):
                raise InvalidHabitIds()

            for position, habit_id in enumerate(ordered_ids):
                habit = by_id[habit_id]
                habit.sort_order = position
                habit.updated_at = updated_at
                session.add(habit)

    # Completion event operations
    def get_completion(self, habit_id: int, completed_date: date) -> Optional[HabitCompletion]:
        """Get the completion event for a habit on a given day."""
        if not is_storable_id(habit_id):
            return None
        with self.session_factory() as session:
            obj = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_date == completed_date)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def add_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Insert a completion event.

        The unique constraint on (habit_id, completed_date) is the source of
        truth: a violation caused by an existing row for that day becomes
        ``HabitAlreadyCompleted``; any other integrity error propagates.
        """
        with self.session_factory() as session:
            session.add(completion)
            try:
                session.flush()
            except IntegrityError as exc:
                session.rollback()
                if self.get_completion(completion.habit_id, completion.completed_date):
                    raise HabitAlreadyCompleted() from exc
                raise
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def delete_completion(self, habit_id: int, completed_date: date) -> bool:
        """Delete the completion event for a habit on a given day."""
        if not is_storable_id(habit_id):
            return False
        with self.session_factory() as session:
            completion = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_date == completed_date)
            ).first()
            if completion is None:
                return False
            session.delete(completion)
            session.commit()
            return True

    def list_completions(
        self, habit_ids: Sequence[int], *, since: date | None = None
    ) -> list[HabitCompletion]:
        """List completion events for the given habits, newest first."""
        habit_ids = [habit_id for habit_id in habit_ids if is_storable_id(habit_id)]
        if not habit_ids:
            return []
        with self.session_factory() as session:
            statement = select(HabitCompletion).where(
                HabitCompletion.habit_id.in_(list(habit_ids))  # type: ignore[attr-defined]
            )
            if since is not None:
                statement = statement.where(HabitCompletion.completed_date >= since)
            statement = statement.order_by(
                HabitCompletion.completed_date.desc(),  # type: ignore[attr-defined]
                HabitCompletion.id.desc(),  # type: ignore[union-attr]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
