import pydantic
from flask import jsonify
from werkzeug.exceptions import HTTPException


class BoardError(Exception):
    status_code = 400
    code = "bad_request"
    default_message = "Bad request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(BoardError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Forbidden(BoardError):
    status_code = 403
    code = "forbidden"
    default_message = "Insufficient permissions"


class Conflict(BoardError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class ValidationError(BoardError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class Unauthorized(BoardError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required"


def _first_issue(exc):
    issue = exc.errors()[0]
    return {
        "loc": [str(part) for part in issue["loc"]],
        "msg": issue["msg"],
        "type": issue["type"],
    }


# ---- JSON Error Handlers ----
def register_error_handlers(app):
    @app.errorhandler(BoardError)
    def handle_board_error(exc):
        return jsonify({"error": exc.code, "message": exc.message}), exc.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_validation_error(exc):
        issue = _first_issue(exc)
        return jsonify({
            "error": ValidationError.code,
            "message": issue["msg"],
            "errors": [issue],
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        code = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": exc.description}), exc.code
