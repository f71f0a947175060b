"""Habit JSON routes."""

from __future__ import annotations

from flask import current_app, g, jsonify, request, url_for
from werkzeug.exceptions import HTTPException

from ...errors import HabitLedgerError
from ...extensions import get_session_factory
from ...infra.repositories import SQLModelHabitRepository
from ...logging_config import get_logger
from ...models.habit import is_storable_id, utcnow
from ...services.habits import HabitService
from . import bp
from .forms import CreateHabitForm, ListHabitsQuery, ReorderHabitsForm, UpdateHabitForm, WindowQuery

logger = get_logger(__name__)


def _service() -> HabitService:
    clock = current_app.config.get("HABITLEDGER_CLOCK") or utcnow
    return HabitService(SQLModelHabitRepository(get_session_factory()), clock=clock)


def _window_days() -> int:
    raw_days = request.args.get("days", current_app.config["DEFAULT_WINDOW_DAYS"])
    return WindowQuery.parse({"days": raw_days}).days


@bp.before_request
def _resolve_user():
    """Trust the user id supplied by the fronting auth layer."""

    header = current_app.config["USER_HEADER"]
    try:
        user_id = int(request.headers.get(header, ""))
    except ValueError:
        user_id = None
    if user_id is None or not is_storable_id(user_id):
        return jsonify({"error": "unauthorized", "message": "Missing or invalid user identity."}), 401
    g.user_id = user_id
    return None


@bp.errorhandler(HabitLedgerError)
def _handle_habit_error(exc: HabitLedgerError):
    logger.info(
        "Habit request rejected",
        extra={"code": exc.code, "path": request.path, "user_id": g.get("user_id")},
    )
    return jsonify(exc.to_dict()), exc.status_code


@bp.errorhandler(Exception)
def _handle_unexpected_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error in habits API", extra={"path": request.path})
    return jsonify({"error": "server_error", "message": "An unexpected error occurred."}), 500


@bp.get("")
def list_habits():
    """List the user's habits in display order."""

    query = ListHabitsQuery.parse(request.args.to_dict())
    views = _service().list_habits(g.user_id, is_active=query.is_active)
    return jsonify([view.to_dict() for view in views])


@bp.post("")
def create_habit():
    form = CreateHabitForm.parse(request.get_json(silent=True))
    view = _service().create_habit(g.user_id, form.title)
    response = jsonify(view.to_dict())
    response.status_code = 201
    response.headers["Location"] = url_for("habits.get_habit", habit_id=view.id)
    return response


@bp.post("/reorder")
def reorder_habits():
    """Re-sequence every habit the user owns in the submitted order."""

    form = ReorderHabitsForm.parse(request.get_json(silent=True))
    views = _service().reorder_habits(g.user_id, form.habit_ids)
    return jsonify([view.to_dict() for view in views])


@bp.get("/<int:habit_id>")
def get_habit(habit_id: int):
    return jsonify(_service().get_habit(g.user_id, habit_id).to_dict())


@bp.put("/<int:habit_id>")
def update_habit(habit_id: int):
    form = UpdateHabitForm.parse(request.get_json(silent=True))
    view = _service().update_habit(
        g.user_id, habit_id, title=form.title, is_active=form.is_active
    )
    return jsonify(view.to_dict())


@bp.delete("/<int:habit_id>")
def delete_habit(habit_id: int):
    _service().delete_habit(g.user_id, habit_id)
    return "", 204


@bp.post("/<int:habit_id>/complete")
def complete_habit(habit_id: int):
    """Mark the habit complete for today's server date."""

    return jsonify(_service().complete_habit(g.user_id, habit_id).to_dict())


@bp.delete("/<int:habit_id>/complete")
def uncomplete_habit(habit_id: int):
    """Undo today's completion."""

    return jsonify(_service().uncomplete_habit(g.user_id, habit_id).to_dict())


@bp.get("/<int:habit_id>/completions")
def list_completions(habit_id: int):
    records = _service().list_completions(g.user_id, habit_id, days=_window_days())
    return jsonify([record.to_dict() for record in records])


@bp.get("/<int:habit_id>/stats")
def habit_stats(habit_id: int):
    stats = _service().habit_stats(g.user_id, habit_id, days=_window_days())
    return jsonify(stats.to_dict())
