from dataclasses import dataclass
from typing import Union

from .errors import Forbidden, NotFound
from .models import Board, BoardMembership, Role, ROLE_HIERARCHY, db


@dataclass(frozen=True)
class Owner:
    board: Board

    @property
    def role(self):
        return Role.OWNER


@dataclass(frozen=True)
class Member:
    board: Board
    role: Role


Access = Union[Owner, Member]


def get_board(board_id):
    board = db.session.get(Board, board_id)
    if board is None:
        raise NotFound("Board not found")
    return board


def resolve_access(board_id, user_id):
    # OWNER by reference, else the membership role, else no access
    board = get_board(board_id)
    if board.owner_id == user_id:
        return Owner(board)

    membership = db.session.execute(
        db.select(BoardMembership).filter_by(board_id=board_id, user_id=user_id)
    ).scalar_one_or_none()
    if membership is not None:
        return Member(board, membership.role)
    return None


def resolve_role(board_id, user_id):
    access = resolve_access(board_id, user_id)
    return access.role if access else None


def has_rank(role, minimum):
    # no role ranks below VIEWER
    if role is None:
        return False
    return ROLE_HIERARCHY.index(role) >= ROLE_HIERARCHY.index(minimum)


def require_role(board_id, user_id, minimum):
    """Return the caller's access to ``board_id`` or raise.

    Raises :class:`NotFound` when the board does not exist and
    :class:`Forbidden` when the caller's role ranks below ``minimum``
    (including having no role at all).
    """
    access = resolve_access(board_id, user_id)
    if access is None or not has_rank(access.role, minimum):
        raise Forbidden("Insufficient permissions for this board")
    return access
