"""Client-facing error taxonomy for habit operations."""

from __future__ import annotations

from typing import Any


class HabitLedgerError(Exception):
    """Base error recovered at the service boundary and rendered as a 4xx."""

    code = "error"
    status_code = 400
    default_message = "The request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class HabitNotFound(HabitLedgerError):
    """Raised for missing habits and for habits owned by someone else."""

    code = "not_found"
    status_code = 404
    default_message = "Habit not found."


class ValidationFailed(HabitLedgerError):
    code = "validation_failed"
    default_message = "Request validation failed."

    def __init__(
        self, message: str | None = None, *, details: dict[str, list[str]] | None = None
    ) -> None:
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["details"] = self.details
        return payload


class HabitAlreadyCompleted(HabitLedgerError):
    code = "already_completed"
    default_message = "Habit already completed today."


class HabitNotCompleted(HabitLedgerError):
    code = "not_completed"
    default_message = "Habit not completed today."


class InvalidHabitIds(HabitLedgerError):
    code = "invalid_ids"
    default_message = "Some habit IDs are invalid."


__all__ = [
    "HabitAlreadyCompleted",
    "HabitLedgerError",
    "HabitNotCompleted",
    "HabitNotFound",
    "InvalidHabitIds",
    "ValidationFailed",
]
