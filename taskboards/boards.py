from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .models import Board, BoardMembership, Role, Task, db


def list_boards(user_id):
    """Boards the user owns or is a member of, paired with the user's role."""
    memberships = {
        m.board_id: m.role
        for m in db.session.execute(
            db.select(BoardMembership).filter_by(user_id=user_id)
        ).scalars()
    }
    stmt = (
        db.select(Board)
        .where(db.or_(Board.owner_id == user_id, Board.id.in_(list(memberships))))
        .order_by(Board.created_at.desc(), Board.id.desc())
    )
    return [
        (board, Role.OWNER if board.owner_id == user_id else memberships[board.id])
        for board in db.session.execute(stmt).scalars()
    ]


def create_board(owner_id, name):
    board = Board(name=name, owner_id=owner_id)
    db.session.add(board)
    db.session.commit()
    current_app.logger.info("📋 Board %d created by user %d", board.id, owner_id)
    return board


def rename_board(board, name):
    board.name = name
    db.session.commit()
    return board


def delete_board(board):
    """Delete a board with its tasks and memberships as one transaction."""
    board_id = board.id
    try:
        db.session.execute(db.delete(Task).where(Task.board_id == board_id))
        db.session.execute(db.delete(BoardMembership).where(BoardMembership.board_id == board_id))
        db.session.execute(db.delete(Board).where(Board.id == board_id))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("❌ Error deleting board %d", board_id)
        raise
    current_app.logger.info("🗑️ Board %d deleted", board_id)
