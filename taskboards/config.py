import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    # required; create_app refuses to start without one
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///taskboards.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # session cookie carries the signed login, nothing is kept server side
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    REMEMBER_COOKIE_HTTPONLY = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    SOCKETIO_CORS_ORIGINS = os.getenv("SOCKETIO_CORS_ORIGINS", "http://localhost:5173")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    API_TITLE = "Task Boards API"
    API_VERSION = "1.0.0"
    API_SERVER_URL = os.getenv("API_SERVER_URL", "http://localhost:4000/api")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"
