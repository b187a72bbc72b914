"""
@file database_source.py
@brief Source looking up lyrics in a local SQLite database.
"""
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional, Union

from base_source import BaseSource, SongQuery
from exceptions import StorageError

SCHEMA = """
CREATE TABLE IF NOT EXISTS songs (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    artist TEXT NOT NULL,
    lyrics TEXT
);
CREATE INDEX IF NOT EXISTS idx_songs_name_artist ON songs (name, artist);
"""


def initialize_database(db_path: Union[str, Path]) -> None:
    """Create the ``songs`` table if it does not exist yet.

    Args:
        db_path: Path to the SQLite file

    Raises:
        StorageError: If the database cannot be created
    """
    try:
        with closing(sqlite3.connect(str(db_path))) as db:
            db.executescript(SCHEMA)
            db.commit()
    except sqlite3.Error as e:
        raise StorageError(f"Could not initialize database {db_path}", details=str(e)) from e


def add_song(db_path: Union[str, Path], name: str, artist: str, lyrics: str) -> None:
    try:
        with closing(sqlite3.connect(str(db_path))) as db:
            db.execute(
                "INSERT INTO songs (name, artist, lyrics) VALUES (?, ?, ?)",
                (name, artist, lyrics)
            )
            db.commit()
    except sqlite3.Error as e:
        raise StorageError(f"Could not store {artist} - {name}", details=str(e)) from e


class DatabaseSource(BaseSource):
    """Exact ``(name, artist)`` lookup in the ``songs`` table."""

    def __init__(self, db_path: Union[str, Path], logger: Optional[logging.Logger] = None):
        """Initialize DatabaseSource.

        Args:
            db_path: Path to an existing SQLite file
            logger: Logger instance
        """
        super().__init__(logger)
        self.db_path = Path(db_path)

    def fetch(self, query: SongQuery) -> Optional[str]:
        """Look up lyrics for an exact name/artist pair.

        Args:
            query: The song being resolved

        Returns:
            Optional[str]: Lyrics of the first matching row, None if no row matches

        Raises:
            StorageError: If the database is missing or the query fails
        """
        if not self.db_path.is_file():
            raise StorageError(f"Lyrics database not found: {self.db_path}")

        try:
            with closing(sqlite3.connect(str(self.db_path))) as db:
                row = db.execute(
                    "SELECT lyrics FROM songs WHERE name = ? AND artist = ? LIMIT 1",
                    (query.name, query.artist)
                ).fetchone()
        except sqlite3.Error as e:
            self.logger.error(f"Database error looking up {query.keywords}: {e}")
            raise StorageError(f"Database lookup failed for {query.keywords}", details=str(e)) from e

        if row is None:
            self.logger.debug(f"No database row for {query.name} / {query.artist}")
            return None

        self.logger.info(f"Found lyrics in database for {query.keywords}")
        return row[0] or ""
