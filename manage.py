# manage.py
import sys

from app import create_app


def create_db():
    """Creates the songs table (no-op when it already exists)."""
    app = create_app()
    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    # create_app already ran the idempotent schema migration
    print(f"Database schema ensured for {db_uri.split('@')[-1]}")


if __name__ == '__main__':
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == 'create_db':
            create_db()
        else:
            print(f"Unknown command: {command}")
            print("Usage: python manage.py create_db")
            sys.exit(1)
    else:
        print("No command provided. Usage: python manage.py create_db")
