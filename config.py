#!/usr/bin/env python
# config.py
import os
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


def build_database_uri(host: str, port: str, user: str, password: str, name: str) -> str:
    return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}".format(
        user=quote_plus(user),
        password=quote_plus(password),
        host=host,
        port=port,
        name=name,
    )


class Config:
    # HTTP server
    SERVER_PORT = _get_int('SERVER_PORT', 8080)
    # Seconds to wait for in-flight requests after SIGINT/SIGTERM
    SHUTDOWN_GRACE_SECONDS = _get_int('SHUTDOWN_GRACE_SECONDS', 5)

    # Database (PostgreSQL); DATABASE_URL wins over the individual parts
    DB_HOST = os.getenv('DB_HOST', 'localhost')
    DB_PORT = os.getenv('DB_PORT', '5432')
    DB_USER = os.getenv('DB_USER', 'postgres')
    DB_PASSWORD = os.getenv('DB_PASSWORD', 'postgres')
    DB_NAME = os.getenv('DB_NAME', 'song_library')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        build_database_uri(DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # External song info API
    EXTERNAL_API_URL = os.getenv('EXTERNAL_API_URL', 'http://localhost:8081')
    EXTERNAL_API_TIMEOUT_SECONDS = _get_int('EXTERNAL_API_TIMEOUT_SECONDS', 10)

    # Logging: debug | info | warn | error
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'info').strip().lower()
    # Control console logging of the per-run log file setup
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    # Optional directory for a per-run log file; empty disables file logging
    LOG_DIR = os.getenv('LOG_DIR', '')

    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', '')

    # Turn Flask debug on/off from env; default off
    DEBUG = _get_bool('DEBUG', False)
