from flask import current_app
from sqlalchemy.exc import IntegrityError

from .errors import Conflict, NotFound
from .models import BoardMembership, Role, User, db


def _reject_owner_role(role):
    if role == Role.OWNER:
        raise Conflict("Ownership cannot be assigned through sharing")


def _membership(board_id, user_id):
    return db.session.execute(
        db.select(BoardMembership).filter_by(board_id=board_id, user_id=user_id)
    ).scalar_one_or_none()


def list_members(board):
    stmt = (
        db.select(BoardMembership)
        .join(User, BoardMembership.user_id == User.id)
        .where(BoardMembership.board_id == board.id)
        .order_by(BoardMembership.role.asc(), User.email.asc())
    )
    return db.session.execute(stmt).scalars().all()


def add_member(board, email, role):
    _reject_owner_role(role)
    user = db.session.execute(
        db.select(User).filter_by(email=email.strip().lower())
    ).scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    if user.id == board.owner_id:
        raise Conflict("The owner already has full access to this board")

    membership = _membership(board.id, user.id)
    if membership is None:
        db.session.add(BoardMembership(board_id=board.id, user_id=user.id, role=role))
    else:
        membership.role = role
    board_id, user_id = board.id, user.id
    try:
        db.session.commit()
    except IntegrityError:
        # another request added the same member first; overwrite its role
        db.session.rollback()
        membership = _membership(board_id, user_id)
        if membership is None:
            raise Conflict("Membership changed concurrently, try again")
        membership.role = role
        db.session.commit()
    membership = _membership(board_id, user_id)
    current_app.logger.info("🤝 Board %d shared with user %d as %s", board_id, user_id, role.value)
    return membership


def change_role(board, user_id, role):
    _reject_owner_role(role)
    membership = _membership(board.id, user_id)
    if membership is None:
        raise NotFound("User is not a member of this board")
    if membership.role != role:
        membership.role = role
        db.session.commit()
        current_app.logger.info("🔁 User %d is now %s on board %d", user_id, role.value, board.id)
    return membership


def remove_member(board, user_id):
    membership = _membership(board.id, user_id)
    if membership is None:
        raise NotFound("User is not a member of this board")
    db.session.delete(membership)
    db.session.commit()
    current_app.logger.info("🚪 User %d removed from board %d", user_id, board.id)
