"""
@file file_cache_source.py
@brief Source reading hand-maintained LRC files keyed by remote song id.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from base_source import BaseSource, SongQuery
from exceptions import StorageError


class FileCacheSource(BaseSource):
    """Read ``<cache_dir>/<song_id>.lrc`` files.

    A missing or empty file is a cache miss, not an error.
    """

    requires_song_id = True

    def __init__(self, cache_dir: Union[str, Path], logger: Optional[logging.Logger] = None):
        """Initialize FileCacheSource.

        Args:
            cache_dir: Directory holding one LRC file per song id
            logger: Logger instance
        """
        super().__init__(logger)
        self.cache_dir = Path(cache_dir)

    def path_for(self, song_id: int) -> Path:
        return self.cache_dir / f"{song_id}.lrc"

    def fetch(self, query: SongQuery) -> Optional[str]:
        """Read the cached LRC file for the query's song id.

        Args:
            query: The song being resolved; ``song_id`` must be set

        Returns:
            Optional[str]: Cached LRC text, or None on a cache miss

        Raises:
            StorageError: If the file exists but cannot be read
        """
        if query.song_id is None:
            return None

        path = self.path_for(query.song_id)
        if not path.is_file():
            self.logger.debug(f"No cached lyrics at {path}")
            return None

        try:
            contents = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading cached lyrics {path}: {e}")
            raise StorageError(f"Could not read cached lyrics {path}", details=str(e)) from e

        if not contents.strip():
            self.logger.debug(f"Cached lyrics at {path} are empty")
            return None

        self.logger.info(f"Found cached lyrics for song {query.song_id}")
        return contents
