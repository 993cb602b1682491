from flask import Blueprint, Response, current_app, jsonify, request
from flask_login import logout_user

from . import boards as board_service
from . import sharing
from . import tasks as task_service
from .auth import authenticate, authenticated, register_user
from .events import notify_board, notify_dashboard
from .models import Preference, Role, User, db
from .openapi import RouteDescriptor
from .permissions import require_role
from .schemas import (
    BoardBody, BulkDeleteFilters, LoginBody, PreferencesBody, RegisterBody,
    ShareBody, ShareRoleBody, TaskCreate, TaskFilters, TaskUpdate,
)

api = Blueprint('api', __name__, url_prefix='/api')


def parse_body(model):
    return model.model_validate(request.get_json(silent=True) or {})


def parse_query(model):
    return model.model_validate(request.args.to_dict())


# ------------------ HEALTH & DOCS ------------------
@api.route('/ping')
def ping():
    return jsonify({"ok": True})


@api.route('/openapi.json')
def openapi_document():
    return Response(current_app.extensions['openapi'], mimetype='application/json')


# ------------------ AUTH ------------------
@api.route('/auth/register', methods=['POST'])
def register():
    user = register_user(parse_body(RegisterBody))
    return jsonify({"id": user.id, "email": user.email}), 201


@api.route('/auth/login', methods=['POST'])
def login():
    user = authenticate(parse_body(LoginBody))
    return jsonify({"id": user.id, "email": user.email})


@api.route('/auth/logout', methods=['POST'])
@authenticated
def logout(identity):
    logout_user()
    return jsonify({"message": "Bye!"})


@api.route('/auth/me')
@authenticated
def me(identity):
    return jsonify(db.session.get(User, identity.user_id).summary())


# ------------------ BOARDS ------------------
@api.route('/boards')
@authenticated
def list_boards(identity):
    return jsonify([board.to_dict(role) for board, role in board_service.list_boards(identity.user_id)])


@api.route('/boards', methods=['POST'])
@authenticated
def create_board(identity):
    body = parse_body(BoardBody)
    board = board_service.create_board(identity.user_id, body.name)
    notify_dashboard()
    return jsonify(board.to_dict(Role.OWNER)), 201


@api.route('/boards/<int:board_id>', methods=['PATCH'])
@authenticated
def update_board(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    body = parse_body(BoardBody)
    board = board_service.rename_board(access.board, body.name)
    notify_board(board_id)
    return jsonify(board.to_dict(access.role))


@api.route('/boards/<int:board_id>', methods=['DELETE'])
@authenticated
def delete_board(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    board_service.delete_board(access.board)
    notify_board(board_id)
    notify_dashboard()
    return jsonify({"deleted": True})


# ------------------ TASKS ------------------
@api.route('/boards/<int:board_id>/tasks')
@authenticated
def list_tasks(identity, board_id):
    require_role(board_id, identity.user_id, Role.VIEWER)
    filters = parse_query(TaskFilters)
    return jsonify([task.to_dict() for task in task_service.list_tasks(board_id, filters)])


@api.route('/boards/<int:board_id>/tasks', methods=['POST'])
@authenticated
def create_task(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.EDITOR)
    task = task_service.create_task(access.board, identity.user_id, parse_body(TaskCreate))
    notify_board(board_id)
    return jsonify(task.to_dict()), 201


@api.route('/boards/<int:board_id>/tasks', methods=['DELETE'])
@authenticated
def delete_tasks(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.EDITOR)
    filters = parse_query(BulkDeleteFilters)
    deleted = task_service.delete_tasks(access.board, filters.completed)
    if deleted:
        notify_board(board_id)
    return jsonify({"deleted": deleted})


@api.route('/boards/<int:board_id>/tasks/<int:task_id>', methods=['PATCH'])
@authenticated
def update_task(identity, board_id, task_id):
    access = require_role(board_id, identity.user_id, Role.EDITOR)
    task = task_service.update_task(access.board, task_id, parse_body(TaskUpdate))
    notify_board(board_id)
    return jsonify(task.to_dict())


@api.route('/boards/<int:board_id>/tasks/<int:task_id>', methods=['DELETE'])
@authenticated
def delete_task(identity, board_id, task_id):
    access = require_role(board_id, identity.user_id, Role.EDITOR)
    task_service.delete_task(access.board, task_id)
    notify_board(board_id)
    return jsonify({"deleted": True})


# ------------------ SHARING ------------------
@api.route('/boards/<int:board_id>/share')
@authenticated
def list_members(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    return jsonify([m.to_dict() for m in sharing.list_members(access.board)])


@api.route('/boards/<int:board_id>/share', methods=['POST'])
@authenticated
def share_board(identity, board_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    body = parse_body(ShareBody)
    membership = sharing.add_member(access.board, body.email, body.role)
    notify_dashboard()
    return jsonify(membership.to_dict()), 201


@api.route('/boards/<int:board_id>/share/<int:user_id>', methods=['PATCH'])
@authenticated
def change_member_role(identity, board_id, user_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    body = parse_body(ShareRoleBody)
    membership = sharing.change_role(access.board, user_id, body.role)
    return jsonify(membership.to_dict())


@api.route('/boards/<int:board_id>/share/<int:user_id>', methods=['DELETE'])
@authenticated
def remove_member(identity, board_id, user_id):
    access = require_role(board_id, identity.user_id, Role.OWNER)
    sharing.remove_member(access.board, user_id)
    notify_dashboard()
    return jsonify({"deleted": True})


# ------------------ PREFERENCES ------------------
@api.route('/preferences')
@authenticated
def get_preferences(identity):
    pref = db.session.execute(
        db.select(Preference).filter_by(user_id=identity.user_id)
    ).scalar_one_or_none()
    return jsonify(pref.to_dict() if pref else None)


@api.route('/preferences', methods=['PUT'])
@authenticated
def save_preferences(identity):
    body = parse_body(PreferencesBody)
    pref = db.session.execute(
        db.select(Preference).filter_by(user_id=identity.user_id)
    ).scalar_one_or_none()
    if pref is None:
        pref = Preference(user_id=identity.user_id)
        db.session.add(pref)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(pref, field, value)
    db.session.commit()
    return jsonify(pref.to_dict())


# ------------------ OPENAPI ROUTES ------------------
_OK = ((200, "OK"),)
_DENIED = ((401, "Authentication required"), (403, "Insufficient permissions"), (404, "Board not found"))

ROUTES = (
    RouteDescriptor("GET", "/ping", "Health check", "Health", secured=False),
    RouteDescriptor("POST", "/auth/register", "Register a user", "Auth", body="RegisterBody",
                    responses=((201, "User created"), (409, "Email already in use")), secured=False),
    RouteDescriptor("POST", "/auth/login", "Log in", "Auth", body="LoginBody",
                    responses=_OK + ((401, "Invalid credentials"),), secured=False),
    RouteDescriptor("POST", "/auth/logout", "Log out", "Auth"),
    RouteDescriptor("GET", "/auth/me", "Current user", "Auth"),
    RouteDescriptor("GET", "/boards", "Boards the caller owns or shares", "Boards"),
    RouteDescriptor("POST", "/boards", "Create a board", "Boards", body="CreateBoardBody",
                    responses=((201, "Board created"),)),
    RouteDescriptor("PATCH", "/boards/{boardId}", "Rename a board", "Boards", body="UpdateBoardBody",
                    responses=_OK + _DENIED),
    RouteDescriptor("DELETE", "/boards/{boardId}", "Delete a board with its tasks and members", "Boards",
                    responses=_OK + _DENIED),
    RouteDescriptor("GET", "/boards/{boardId}/tasks", "List a board's tasks", "Tasks", query="TaskFilters",
                    responses=_OK + _DENIED),
    RouteDescriptor("POST", "/boards/{boardId}/tasks", "Create a task", "Tasks", body="TaskCreate",
                    responses=((201, "Task created"),) + _DENIED),
    RouteDescriptor("DELETE", "/boards/{boardId}/tasks", "Bulk delete tasks by completion", "Tasks",
                    query="BulkDeleteFilters", responses=_OK + _DENIED),
    RouteDescriptor("PATCH", "/boards/{boardId}/tasks/{taskId}", "Update a task", "Tasks", body="TaskUpdate",
                    responses=_OK + _DENIED),
    RouteDescriptor("DELETE", "/boards/{boardId}/tasks/{taskId}", "Delete a task", "Tasks",
                    responses=_OK + _DENIED),
    RouteDescriptor("GET", "/boards/{boardId}/share", "List board members", "Sharing",
                    responses=_OK + _DENIED),
    RouteDescriptor("POST", "/boards/{boardId}/share", "Share a board", "Sharing", body="ShareBody",
                    responses=((201, "Member added"), (409, "Owner role cannot be shared")) + _DENIED),
    RouteDescriptor("PATCH", "/boards/{boardId}/share/{userId}", "Change a member's role", "Sharing",
                    body="ShareRoleBody", responses=_OK + _DENIED),
    RouteDescriptor("DELETE", "/boards/{boardId}/share/{userId}", "Remove a member", "Sharing",
                    responses=_OK + _DENIED),
    RouteDescriptor("GET", "/preferences", "Get preferences", "Preferences"),
    RouteDescriptor("PUT", "/preferences", "Save preferences", "Preferences", body="PreferencesBody"),
)
