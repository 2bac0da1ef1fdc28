import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'src' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture
def database_uri(tmp_path_factory):
    """Per-test sqlite file so ids and unique pairs never leak between tests."""
    db_dir = tmp_path_factory.mktemp("db")
    return f"sqlite:///{(Path(db_dir) / 'test.sqlite').as_posix()}"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, database_uri):
    monkeypatch.setenv("DATABASE_URL", database_uri)
    monkeypatch.setenv("EXTERNAL_API_URL", "http://song-info.test")
    yield


@pytest.fixture
def info_client():
    """Canned external song info API; tests tweak ``detail`` / ``error``."""
    return test_stubs.SongInfoClientStub()


@pytest.fixture
def app(monkeypatch, database_uri, info_client):
    import app as app_module

    # Never hit a real song info API from tests
    monkeypatch.setattr(app_module, "build_song_info_client", lambda config: info_client, raising=True)

    application = app_module.create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": database_uri,
            "EXTERNAL_API_URL": "http://song-info.test",
        }
    )
    yield application

    from src.database.db_manager import db

    with application.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from src.database.db_manager import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        try:
            db.session.rollback()
        except Exception:
            pass
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def repository(db_session):
    from src.domain.songs import SqlAlchemySongRepository

    return SqlAlchemySongRepository()


@pytest.fixture
def client(app):
    return app.test_client()
