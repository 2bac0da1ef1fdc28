"""Route blueprints exposed via Flask."""

from .songs import songs_bp
from .health import health_bp

__all__ = [
    "songs_bp",
    "health_bp",
]
