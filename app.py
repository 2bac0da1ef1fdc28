import os
import logging
from datetime import datetime
from uuid import uuid4

from flask import Flask, request, jsonify, g
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from src.database.db_manager import initialize_database
from src.domain.songs import SongService, SqlAlchemySongRepository, build_song_info_client
from src.interfaces.http.routes import songs_bp, health_bp
from src.observability import configure_structured_logging, metrics_blueprint
from src.server import serve


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'


def configure_logging(log_dir: str) -> str:
    """
    Add a per-run log file to the root logger:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    # Quiet Werkzeug's own console handler; let it propagate to root
    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.handlers = []
    werkzeug_logger.propagate = True

    return log_path


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    app.json.sort_keys = False

    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        logger.info("HTTP request", extra={"query": request.query_string.decode("utf-8", "replace")})

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)
        return response

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({'error': (exc.name or 'error').lower()}), exc.code

    @app.errorhandler(Exception)
    def _unhandled_error(exc: Exception):
        # Keep the process alive; the client only sees a generic message
        logger.exception("Unhandled error while serving request: %s", exc)
        return jsonify({'error': 'internal server error'}), 500

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS') or []
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}}, expose_headers=[REQUEST_ID_HEADER])

    # Create the songs table if absent before any repository call
    initialize_database(app)

    song_service = SongService(
        repository=SqlAlchemySongRepository(),
        info_client=build_song_info_client(app.config),
    )
    # Expose the service for routes
    app.extensions['song_service'] = song_service

    # --- Register Blueprints ---
    app.register_blueprint(songs_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    app = create_app()
    if Config.LOG_DIR:
        log_file_path = configure_logging(Config.LOG_DIR)
        logger.info("File logging initialized at %s", log_file_path)

    if not Config.EXTERNAL_API_URL:
        logger.warning("EXTERNAL_API_URL is not set; song creation will fail.")

    logger.info("Starting song library service on port %s", Config.SERVER_PORT)
    serve(app, host='0.0.0.0', port=Config.SERVER_PORT, grace_seconds=Config.SHUTDOWN_GRACE_SECONDS)
