"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from taskboards import create_app
from taskboards.config import TestConfig
from taskboards.models import Board, BoardMembership, Task, User, db


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def ctx(app):
    """Push an application context for service-level tests."""
    with app.app_context():
        yield app


@pytest.fixture()
def make_user(ctx):
    def _make(email: str, name: str | None = None) -> User:
        user = User(email=email, name=name or email.split("@")[0], password_hash="unused")
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def make_board(ctx):
    def _make(owner: User, name: str = "Roadmap", members: dict | None = None) -> Board:
        board = Board(name=name, owner_id=owner.id)
        db.session.add(board)
        db.session.flush()
        for user, role in (members or {}).items():
            db.session.add(BoardMembership(board_id=board.id, user_id=user.id, role=role))
        db.session.commit()
        return board

    return _make


@pytest.fixture()
def make_task(ctx):
    base = datetime(2026, 3, 1, 9, 0, 0)

    def _make(board: Board, creator: User, title: str, *, completed: bool = False, minutes: int = 0) -> Task:
        task = Task(
            board_id=board.id,
            creator_id=creator.id,
            title=title,
            completed=completed,
            created_at=base + timedelta(minutes=minutes),
        )
        db.session.add(task)
        db.session.commit()
        return task

    return _make


@pytest.fixture()
def login_client(app):
    """Return a factory for test clients that are registered and logged in.

    Usage::

        alice = login_client("alice@example.com")
        alice.post("/api/boards", json={"name": "Sprint"})
    """

    def _client(email: str, name: str | None = None, password: str = "secret123"):
        client = app.test_client()
        resp = client.post(
            "/api/auth/register",
            json={"email": email, "name": name or email.split("@")[0], "password": password},
        )
        assert resp.status_code == 201, resp.get_json()
        client.user_id = resp.get_json()["id"]
        client.email = email
        return client

    return _client
