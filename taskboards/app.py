import os

from flask import Flask

from .auth import login_manager
from .config import Config
from .errors import register_error_handlers
from .events import socketio
from .models import db
from .openapi import build_openapi, freeze
from .routes import ROUTES, api
from .schemas import SCHEMAS


def create_app(config_class=Config):
    # ------------------ APP & DB SETUP ------------------
    app = Flask(__name__)
    app.config.from_object(config_class)
    if not app.config.get("SECRET_KEY"):
        raise RuntimeError("SECRET_KEY is not set; add it to the environment or .env")
    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    login_manager.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config['SOCKETIO_CORS_ORIGINS'])

    register_error_handlers(app)
    app.register_blueprint(api)

    # built once, served as immutable bytes
    app.extensions['openapi'] = freeze(build_openapi(
        SCHEMAS,
        ROUTES,
        title=app.config['API_TITLE'],
        version=app.config['API_VERSION'],
        server_url=app.config['API_SERVER_URL'],
    ))

    with app.app_context():
        db.create_all()
    app.logger.debug("✅ Database ready at %s", app.config['SQLALCHEMY_DATABASE_URI'])
    return app


# ------------------ RUN ------------------
def main():
    app = create_app()
    port = int(os.getenv('PORT', '4000'))
    print(f"🚀 API ready on http://localhost:{port}/api (OpenAPI at /api/openapi.json)")
    # the Werkzeug dev server is only allowed with FLASK_DEBUG on; use eventlet or gevent otherwise
    socketio.run(app, port=port, debug=app.debug, allow_unsafe_werkzeug=app.debug)


if __name__ == '__main__':
    main()
