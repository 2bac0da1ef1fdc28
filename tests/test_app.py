import logging
import os

import pytest


@pytest.mark.unit
def test_create_app_registers_blueprints_and_service(app):
    for bp in ("songs_bp", "health_bp", "metrics_bp"):
        assert bp in app.blueprints
    assert "song_service" in app.extensions


@pytest.mark.unit
def test_create_app_creates_songs_table(app):
    from sqlalchemy import inspect
    from src.database.db_manager import db

    with app.app_context():
        inspector = inspect(db.engine)
        assert "songs" in inspector.get_table_names()
        columns = {c["name"] for c in inspector.get_columns("songs")}
        assert columns == {
            "id", "group_name", "song_name", "release_date", "text", "link", "created_at", "updated_at",
        }


@pytest.mark.unit
def test_schema_creation_is_idempotent(client, app):
    from src.database.db_manager import Song, db

    assert client.post("/api/v1/songs", json={"group": "G", "song": "S"}).status_code == 201
    with app.app_context():
        # Running the migration a second time must not fail or drop data
        db.create_all()
        assert db.session.query(Song).count() == 1


@pytest.mark.unit
def test_healthz_and_readyz_report_ok(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok", "checks": {"database": "ok"}}

    r = client.get("/readyz")
    assert r.status_code == 200
    assert r.get_json()["status"] == "ready"


@pytest.mark.unit
def test_readyz_blocked_without_upstream_url(app, client):
    app.config["EXTERNAL_API_URL"] = ""
    r = client.get("/readyz")
    assert r.status_code == 503
    assert r.get_json()["upstream_configured"] is False


@pytest.mark.unit
def test_metrics_endpoint_exposes_song_counters(client):
    client.get("/api/v1/songs")
    r = client.get("/metrics")
    assert r.status_code == 200
    assert b"songlibrary_song_operations_total" in r.data


@pytest.mark.unit
def test_configure_logging_creates_file_and_is_idempotent(tmp_path, monkeypatch):
    import app as app_module

    monkeypatch.setattr(app_module.Config, "ENABLE_CONSOLE_LOGS", False, raising=True)

    root = logging.getLogger()
    old_handlers = list(root.handlers)
    old_level = root.level
    try:
        log_dir = tmp_path / "logs"
        path1 = app_module.configure_logging(str(log_dir))
        assert os.path.exists(path1)

        fhs = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(fhs) == 1
        assert os.path.abspath(fhs[0].baseFilename) == os.path.abspath(path1)

        app_module.configure_logging(str(log_dir))
        fhs2 = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(fhs2) == 1
    finally:
        for handler in logging.getLogger().handlers:
            if isinstance(handler, logging.FileHandler):
                handler.close()
        root.handlers = old_handlers
        root.setLevel(old_level)
