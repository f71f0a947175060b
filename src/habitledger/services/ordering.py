"""Per-user explicit ordering of habits."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..domain.repositories import HabitRepository
from ..errors import InvalidHabitIds
from ..logging_config import get_logger

logger = get_logger(__name__)


class HabitOrdering:
    """Assigns sort indices on creation and re-sequences them on reorder."""

    def __init__(self, repository: HabitRepository) -> None:
        self.repository = repository

    def next_sort_order(self, user_id: int) -> int:
        """Return one past the user's highest sort index, or 0 for a first habit."""
        current_max = self.repository.max_sort_order(user_id=user_id)
        return 0 if current_max is None else current_max + 1

    def reorder(self, user_id: int, habit_ids: Sequence[int], *, now: datetime) -> None:
        """Give each habit its position in ``habit_ids`` as its sort index.

        ``habit_ids`` must name every habit the user owns exactly once; any
        missing, duplicated or foreign id rejects the request before anything
        is written.
        """
        ordered = list(habit_ids)
        owned = set(self.repository.list_ids(user_id=user_id))
        if len(set(ordered)) != len(ordered) or set(ordered) != owned:
            logger.info(
                "Rejected habit reorder",
                extra={"user_id": user_id, "requested": ordered, "owned_count": len(owned)},
            )
            raise InvalidHabitIds()

        self.repository.apply_sort_order(ordered, user_id=user_id, updated_at=now)
        logger.info("Reordered habits", extra={"user_id": user_id, "count": len(ordered)})


__all__ = ["HabitOrdering"]
