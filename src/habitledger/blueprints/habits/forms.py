"""Request payload models for the habits API."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

from ...errors import ValidationFailed
from ...services.stats import DEFAULT_WINDOW_DAYS

MAX_WINDOW_DAYS = 3650


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def parse(cls, data: Mapping[str, Any] | None):
        """Validate ``data`` or raise ``ValidationFailed`` with per-field messages."""

        try:
            return cls.model_validate(data if data is not None else {})
        except ValidationError as exc:
            raise ValidationFailed(details=_structured_errors(exc)) from exc


def _structured_errors(exc: ValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


class CreateHabitForm(_Payload):
    """Body of ``POST /habits``; title rules are enforced by the service."""

    title: str = ""


class UpdateHabitForm(_Payload):
    title: str = ""
    is_active: StrictBool = Field(default=True, alias="isActive")


class ReorderHabitsForm(_Payload):
    habit_ids: list[StrictInt] = Field(alias="habitIds")


class WindowQuery(_Payload):
    """``?days=`` query parameter shared by the completions and stats endpoints."""

    days: int = Field(default=DEFAULT_WINDOW_DAYS, ge=0, le=MAX_WINDOW_DAYS)


class ListHabitsQuery(_Payload):
    is_active: bool | None = Field(default=None, alias="isActive")


__all__ = [
    "CreateHabitForm",
    "ListHabitsQuery",
    "ReorderHabitsForm",
    "UpdateHabitForm",
    "WindowQuery",
]
