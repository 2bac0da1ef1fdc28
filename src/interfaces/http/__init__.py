"""HTTP interface (Flask blueprints)."""
