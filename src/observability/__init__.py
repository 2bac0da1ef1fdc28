# noqa: D104 - package initialization
from .logging import configure_structured_logging, parse_log_level  # noqa: F401
from .metrics import metrics_blueprint, record_song_operation, record_upstream_lookup  # noqa: F401
