"""Tests for effective-role resolution and the role gate."""

from __future__ import annotations

import pytest

from taskboards.errors import Forbidden, NotFound
from taskboards.models import Role, ROLE_HIERARCHY
from taskboards.permissions import Member, Owner, has_rank, require_role, resolve_access, resolve_role


# ---------------------------------------------------------------------------
# resolve_access / resolve_role
# ---------------------------------------------------------------------------


class TestResolveAccess:
    def test_owner_short_circuits_membership(self, make_user, make_board):
        owner = make_user("owner@example.com")
        board = make_board(owner)

        access = resolve_access(board.id, owner.id)

        assert isinstance(access, Owner)
        assert access.role is Role.OWNER
        assert access.board.id == board.id

    def test_member_gets_stored_role(self, make_user, make_board):
        owner = make_user("owner@example.com")
        editor = make_user("editor@example.com")
        viewer = make_user("viewer@example.com")
        board = make_board(owner, members={editor: Role.EDITOR, viewer: Role.VIEWER})

        assert resolve_access(board.id, editor.id) == Member(board, Role.EDITOR)
        assert resolve_role(board.id, viewer.id) is Role.VIEWER

    def test_stranger_has_no_role(self, make_user, make_board):
        owner = make_user("owner@example.com")
        stranger = make_user("stranger@example.com")
        board = make_board(owner)

        assert resolve_access(board.id, stranger.id) is None
        assert resolve_role(board.id, stranger.id) is None

    def test_missing_board_is_not_found(self, make_user):
        user = make_user("someone@example.com")
        with pytest.raises(NotFound):
            resolve_role(9999, user.id)

    def test_owner_role_only_from_owner_reference(self, make_user, make_board):
        owner = make_user("owner@example.com")
        editor = make_user("editor@example.com")
        board = make_board(owner, members={editor: Role.EDITOR})
        other = make_board(editor)

        assert resolve_role(board.id, editor.id) is Role.EDITOR
        assert resolve_role(other.id, editor.id) is Role.OWNER
        assert resolve_role(other.id, owner.id) is None


# ---------------------------------------------------------------------------
# has_rank / require_role
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("role", ROLE_HIERARCHY)
@pytest.mark.parametrize("minimum", ROLE_HIERARCHY)
def test_has_rank_follows_hierarchy(role, minimum):
    expected = ROLE_HIERARCHY.index(role) >= ROLE_HIERARCHY.index(minimum)
    assert has_rank(role, minimum) is expected


@pytest.mark.parametrize("minimum", ROLE_HIERARCHY)
def test_no_role_never_ranks(minimum):
    assert has_rank(None, minimum) is False


class TestRequireRole:
    def test_viewer_cannot_edit(self, make_user, make_board):
        owner = make_user("owner@example.com")
        viewer = make_user("viewer@example.com")
        board = make_board(owner, members={viewer: Role.VIEWER})

        assert require_role(board.id, viewer.id, Role.VIEWER).role is Role.VIEWER
        with pytest.raises(Forbidden):
            require_role(board.id, viewer.id, Role.EDITOR)

    def test_editor_cannot_manage(self, make_user, make_board):
        owner = make_user("owner@example.com")
        editor = make_user("editor@example.com")
        board = make_board(owner, members={editor: Role.EDITOR})

        assert require_role(board.id, editor.id, Role.EDITOR).role is Role.EDITOR
        with pytest.raises(Forbidden):
            require_role(board.id, editor.id, Role.OWNER)

    def test_owner_passes_every_gate(self, make_user, make_board):
        owner = make_user("owner@example.com")
        board = make_board(owner)
        for minimum in ROLE_HIERARCHY:
            assert isinstance(require_role(board.id, owner.id, minimum), Owner)

    def test_missing_board_and_no_access_are_distinct(self, make_user, make_board):
        owner = make_user("owner@example.com")
        stranger = make_user("stranger@example.com")
        board = make_board(owner)

        with pytest.raises(NotFound):
            require_role(board.id + 100, stranger.id, Role.VIEWER)
        with pytest.raises(Forbidden):
            require_role(board.id, stranger.id, Role.VIEWER)
