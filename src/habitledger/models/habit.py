"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import Column, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

TITLE_MAX_LENGTH = 200

# SQLite INTEGER columns are signed 64-bit.
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


def is_storable_id(value: int) -> bool:
    return ID_MIN <= value <= ID_MAX


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A user-defined habit tracked for daily completion."""

    __tablename__: ClassVar[str] = "habit"
    __table_args__ = (Index("ix_habit_user_sort", "user_id", "sort_order"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    title: str = Field(nullable=False, max_length=TITLE_MAX_LENGTH)
    is_active: bool = Field(default=True, nullable=False)
    sort_order: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    completions: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitCompletion",
            back_populates="habit",
            cascade="all, delete-orphan",
        ),
    )


class HabitCompletion(SQLModel, table=True):
    """A record that a habit was completed on one calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"
    __table_args__ = (
        UniqueConstraint("habit_id", "completed_date", name="uq_habit_completion_per_day"),
        Index("ix_habit_completion_year_month", "habit_id", "year", "month"),
        Index("ix_habit_completion_year_week", "habit_id", "year", "week"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("habit.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    completed_at: datetime = Field(default_factory=utcnow, nullable=False)
    completed_date: date = Field(nullable=False, index=True)
    year: int = Field(nullable=False)
    month: int = Field(nullable=False)
    week: int = Field(nullable=False)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )

    @classmethod
    def for_day(cls, habit_id: int, day: date, *, completed_at: datetime) -> "HabitCompletion":
        """Build an event for ``day`` with its calendar index columns filled in."""

        return cls(
            habit_id=habit_id,
            completed_at=completed_at,
            completed_date=day,
            year=day.year,
            month=day.month,
            week=day.isocalendar()[1],
        )
