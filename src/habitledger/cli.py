"""Flask CLI commands for HabitLedger."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import click
from flask import current_app

DEMO_HABITS = ("Drink water", "Read 20 pages", "Stretch", "Journal")


def seed_demo_habits(service, user_id: int, *, days: int) -> int:
    """Create demo habits for ``user_id`` with a varied completion pattern.

    Returns the number of habits created; nothing is written when the user
    already has habits.
    """
    from .models.habit import HabitCompletion

    if service.repository.list_ids(user_id=user_id):
        return 0

    today = service.now().date()
    for index, title in enumerate(DEMO_HABITS):
        view = service.create_habit(user_id, title)
        # Every (index + 1)-th day going back from today.
        for offset in range(0, days + 1, index + 1):
            day = today - timedelta(days=offset)
            service.repository.add_completion(
                HabitCompletion.for_day(
                    view.id, day, completed_at=datetime.combine(day, time(12), tzinfo=timezone.utc)
                )
            )
    return len(DEMO_HABITS)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habitledger-init-db")
    def habitledger_init_db() -> None:
        """Create database tables."""

        from .extensions import get_engine
        from .infra.database import init_database

        init_database(get_engine())
        click.echo("Database tables created.")

    @app.cli.command("habitledger-seed")
    @click.option("--user-id", type=int, required=True, help="Owner of the demo habits")
    @click.option("--days", type=click.IntRange(0, 365), default=14, show_default=True)
    def habitledger_seed(user_id: int, days: int) -> None:
        """Seed demo habits and completions for one user."""

        from .extensions import get_session_factory
        from .infra.repositories import SQLModelHabitRepository
        from .models.habit import utcnow
        from .services.habits import HabitService

        clock = current_app.config.get("HABITLEDGER_CLOCK") or utcnow
        service = HabitService(SQLModelHabitRepository(get_session_factory()), clock=clock)
        created = seed_demo_habits(service, user_id, days=days)
        if created:
            click.echo(f"Seeded {created} habits for user {user_id}.")
        else:
            click.echo(f"User {user_id} already has habits; nothing seeded.")
