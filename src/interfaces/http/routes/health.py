from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from src.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


def _database_check() -> str:
    try:
        db.session.execute(text("SELECT 1"))
        return "ok"
    except Exception as exc:  # pragma: no cover - DB failure path
        current_app.logger.warning("Database health check failed: %s", exc)
        return f"error: {exc.__class__.__name__}"


@health_bp.route("/healthz")
def healthz():
    checks = {"database": _database_check()}
    status = 200 if checks["database"] == "ok" else 503
    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status


@health_bp.route("/readyz")
def readyz():
    database = _database_check()
    upstream_configured = bool(current_app.config.get("EXTERNAL_API_URL"))
    ready = database == "ok" and upstream_configured
    payload = {
        "status": "ready" if ready else "blocked",
        "database": database,
        "upstream_configured": upstream_configured,
    }
    return jsonify(payload), 200 if ready else 503
