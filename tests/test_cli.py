"""Tests for the Flask CLI commands."""

from __future__ import annotations

from conftest import OTHER_USER_ID, USER_ID, auth
from habitledger.cli import DEMO_HABITS


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["habitledger-init-db"])

    assert result.exit_code == 0
    assert "Database tables created." in result.output


def test_seed_creates_demo_habits_with_history(app, client):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["habitledger-seed", "--user-id", str(USER_ID), "--days", "6"])

    assert result.exit_code == 0
    assert f"Seeded {len(DEMO_HABITS)} habits for user {USER_ID}." in result.output

    habits = client.get("/habits", headers=auth()).get_json()
    assert [habit["title"] for habit in habits] == list(DEMO_HABITS)
    assert [habit["totalCompletions"] for habit in habits] == [7, 4, 3, 2]
    assert [habit["currentStreak"] for habit in habits] == [7, 4, 1, 1]
    assert all(habit["isCompletedToday"] for habit in habits)

    assert client.get("/habits", headers=auth(OTHER_USER_ID)).get_json() == []


def test_seed_is_skipped_when_user_has_habits(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["habitledger-seed", "--user-id", str(USER_ID), "--days", "2"])

    result = runner.invoke(args=["habitledger-seed", "--user-id", str(USER_ID)])

    assert result.exit_code == 0
    assert "nothing seeded" in result.output


def test_seed_requires_user_id(app):
    result = app.test_cli_runner().invoke(args=["habitledger-seed"])

    assert result.exit_code != 0
    assert "--user-id" in result.output
