"""Database and extension wiring for HabitLedger."""

from __future__ import annotations

from flask import Flask, current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database

EXTENSION_KEY = "habitledger"


def init_db(app: Flask) -> None:
    """Create the engine and schema and attach them to the app."""

    config: BaseConfig = app.config["HABITLEDGER_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    app.extensions[EXTENSION_KEY] = {"engine": engine, "session_factory": session_factory}
    # TODO(@migrations): replace create_all with Alembic revisions once the schema needs a change.


def get_engine() -> Engine:
    """Return the engine bound to the current app."""

    state = current_app.extensions.get(EXTENSION_KEY)
    if state is None:  # pragma: no cover - misconfigured app
        raise RuntimeError("Database engine not initialized")
    return state["engine"]


def get_session_factory() -> SessionFactory:
    """Return the session factory bound to the current app."""

    state = current_app.extensions.get(EXTENSION_KEY)
    if state is None:  # pragma: no cover - misconfigured app
        raise RuntimeError("Database engine not initialized")
    return state["session_factory"]
