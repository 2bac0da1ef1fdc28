# src/database/db_manager.py
import logging
import os
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import UniqueConstraint
from sqlalchemy.engine import make_url

# Initialize the SQLAlchemy object
db = SQLAlchemy()
logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP columns below."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Song(db.Model):
    __tablename__ = 'songs'

    id = db.Column(db.Integer, primary_key=True)
    group_name = db.Column(db.String(255), nullable=False)
    song_name = db.Column(db.String(255), nullable=False)
    release_date = db.Column(db.String(50), nullable=False, default='')
    text = db.Column(db.Text, nullable=False, default='')
    link = db.Column(db.String(255), nullable=False, default='')
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('group_name', 'song_name', name='unique_group_song'),
    )

    def to_dict(self) -> dict:
        """Converts the Song row to the JSON shape served by the API."""
        return {
            'id': self.id,
            'group': self.group_name,
            'song': self.song_name,
            'releaseDate': self.release_date,
            'text': self.text,
            'link': self.link,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f'<Song {self.id}: {self.group_name} - {self.song_name}>'


def initialize_database(app):
    """
    Initializes the SQLAlchemy extension with the Flask app instance
    and creates the songs table if it doesn't already exist.
    """
    db.init_app(app)

    # Ensure the directory for a configured SQLite file exists (tests, local runs)
    try:
        uri = app.config.get('SQLALCHEMY_DATABASE_URI')
        if uri:
            url = make_url(uri)
            if url.get_backend_name() == 'sqlite' and url.database and url.database != ':memory:':
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)
                    logger.info("Created SQLite DB directory: %s", db_dir)
    except Exception as e:
        # Don't block app startup on path parsing issues; log and continue
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    with app.app_context():
        logger.info("Running database migrations")
        db.create_all()
        logger.info("Database schema is up to date")
