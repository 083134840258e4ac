"""Database manager for SQLite connections and schema setup."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from config import Config, get_migrations_dir
from db.migrator import apply_pending, get_pending_migrations, init_schema_migrations_table


class DatabaseManager:
    """Opens connections to the catalog database and keeps its schema current.

    Args:
        config: Application configuration object.
        migrations_dir: Directory of .sql migrations. Defaults to the ones
            shipped in db/migrations.
    """

    def __init__(self, config: Config, migrations_dir: Optional[Path] = None):
        self.config = config
        self.migrations_dir = migrations_dir or get_migrations_dir()

    @contextmanager
    def connect(self):
        """Get a database connection that is closed on exit.

        Foreign keys are switched on per connection so that subcategories
        cannot point at a missing category.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def pending_migrations(self) -> List[str]:
        """Names of the migrations not yet applied to the database."""
        with self.connect() as conn:
            init_schema_migrations_table(conn)
            return get_pending_migrations(conn, self.migrations_dir)

    def migrate(self) -> List[str]:
        """Apply every pending migration.

        Returns:
            Names of the migrations that were applied, in order.

        Raises:
            sqlite3.Error: If a migration fails; earlier ones stay applied.
        """
        with self.connect() as conn:
            return apply_pending(conn, self.migrations_dir)
