import enum
from datetime import datetime, timezone

from flask_login import UserMixin
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _isoformat(value):
    return value.isoformat(timespec="milliseconds") + "Z" if value else None


class Role(str, enum.Enum):
    VIEWER = "VIEWER"
    EDITOR = "EDITOR"
    OWNER = "OWNER"


# lowest first; position is the rank used by the permission gate
ROLE_HIERARCHY = (Role.VIEWER, Role.EDITOR, Role.OWNER)


# ---- User Model ----
class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    boards = db.relationship('Board', back_populates='owner', lazy=True)
    memberships = db.relationship('BoardMembership', back_populates='user', lazy=True)

    def summary(self):
        return {"id": self.id, "name": self.name, "email": self.email}


# ---- Board Model ----
class Board(db.Model):
    __tablename__ = 'boards'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    owner = db.relationship('User', back_populates='boards')
    memberships = db.relationship('BoardMembership', back_populates='board', lazy=True)
    tasks = db.relationship('Task', back_populates='board', lazy=True)

    def to_dict(self, role=None):
        data = {
            "id": self.id,
            "name": self.name,
            "ownerId": self.owner_id,
            "owner": self.owner.summary(),
            "createdAt": _isoformat(self.created_at),
        }
        if role is not None:
            data["role"] = role.value
        return data


# ---- Board Membership Model ----
class BoardMembership(db.Model):
    __tablename__ = 'board_memberships'
    id = db.Column(db.Integer, primary_key=True)
    board_id = db.Column(db.Integer, db.ForeignKey('boards.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    role = db.Column(db.Enum(Role, name="board_role"), nullable=False, default=Role.VIEWER)

    board = db.relationship('Board', back_populates='memberships')
    user = db.relationship('User', back_populates='memberships')

    __table_args__ = (
        db.UniqueConstraint('board_id', 'user_id', name='uq_board_user'),
        db.CheckConstraint("role != 'OWNER'", name='ck_membership_not_owner'),
    )

    def to_dict(self):
        return {
            "userId": self.user_id,
            "email": self.user.email,
            "name": self.user.name,
            "role": self.role.value,
        }


# ---- Task Model ----
class Task(db.Model):
    __tablename__ = 'tasks'
    id = db.Column(db.Integer, primary_key=True)
    board_id = db.Column(db.Integer, db.ForeignKey('boards.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=True)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    creator_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False, index=True)

    board = db.relationship('Board', back_populates='tasks')
    creator = db.relationship('User')

    def to_dict(self):
        return {
            "id": self.id,
            "boardId": self.board_id,
            "title": self.title,
            "content": self.content,
            "completed": self.completed,
            "creatorId": self.creator_id,
            "creator": self.creator.summary() if self.creator else None,
            "createdAt": _isoformat(self.created_at),
        }


# ---- Preference Model ----
class Preference(db.Model):
    __tablename__ = 'preferences'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    auto_refresh_interval = db.Column(db.Integer, nullable=True)
    task_view = db.Column(db.String(10), nullable=True)

    def to_dict(self):
        return {
            "userId": self.user_id,
            "autoRefreshInterval": self.auto_refresh_interval,
            "taskView": self.task_view,
        }
