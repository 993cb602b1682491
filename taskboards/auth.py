from functools import wraps
from typing import NamedTuple

from flask import current_app, jsonify, session
from flask_login import LoginManager, current_user, login_required, login_user
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import Conflict, Unauthorized
from .models import User, db

login_manager = LoginManager()


class Identity(NamedTuple):
    """The authenticated caller, handed to views explicitly."""

    user_id: int
    email: str


# ------------------ LOGIN MANAGEMENT ------------------
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    # drop whatever credential came with the request
    session.clear()
    return jsonify({"error": Unauthorized.code, "message": Unauthorized.default_message}), 401


def authenticated(view):
    """Require a logged-in user and pass their :class:`Identity` first."""

    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        identity = Identity(user_id=current_user.id, email=current_user.email)
        return view(identity, *args, **kwargs)

    return wrapper


# ------------------ ACCOUNTS ------------------
def register_user(body):
    email = body.email.strip().lower()
    if db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none():
        raise Conflict("Email already in use")

    user = User(email=email, name=body.name, password_hash=generate_password_hash(body.password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        db.session.rollback()
        raise Conflict("Email already in use")
    login_user(user, remember=False)
    session.permanent = True
    current_app.logger.info("👤 Registered user %d", user.id)
    return user


def authenticate(body):
    user = db.session.execute(
        db.select(User).filter_by(email=body.email.strip().lower())
    ).scalar_one_or_none()
    if user is None or not check_password_hash(user.password_hash, body.password):
        current_app.logger.warning("Failed login for %s", body.email)
        raise Unauthorized("Invalid credentials")
    login_user(user, remember=False)
    session.permanent = True
    return user
