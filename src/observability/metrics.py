from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

SONG_OPERATIONS = Counter(
    "songlibrary_song_operations_total",
    "Song API operations by operation name and outcome.",
    ["operation", "outcome"],
)
UPSTREAM_LOOKUPS = Counter(
    "songlibrary_upstream_lookups_total",
    "Calls to the external song info API by outcome.",
    ["outcome"],
)
UPSTREAM_LATENCY = Histogram(
    "songlibrary_upstream_lookup_seconds",
    "Latency of external song info lookups.",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, float("inf")),
)


def record_song_operation(operation: str, outcome: str) -> None:
    SONG_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def record_upstream_lookup(outcome: str, duration_seconds: Optional[float] = None) -> None:
    UPSTREAM_LOOKUPS.labels(outcome=outcome).inc()
    if duration_seconds is not None:
        UPSTREAM_LATENCY.observe(duration_seconds)


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
