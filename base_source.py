"""
@file base_source.py
@brief Base class for all raw lyrics sources.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class SongQuery:
    """A lookup request as it travels along the source chain.

    ``song_id`` is filled in by the remote search the first time an
    id-keyed source needs it; ``searched`` records that the search already
    ran so it is not repeated.
    """
    name: str
    artist: str
    song_id: Optional[int] = None
    searched: bool = False

    @property
    def keywords(self) -> str:
        return f"{self.name} {self.artist}"


class BaseSource(ABC):
    """Base class that all lyrics sources must inherit from.

    A source looks up raw LRC text for a song. ``fetch`` returns ``None``
    when the song is simply absent, which lets the chain try the next
    source. Any other failure is raised as a ``LyricsError`` and stops the
    chain.
    """

    # Sources keyed by a remote song id instead of name/artist
    requires_song_id: bool = False

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize BaseSource.

        Args:
            logger: Logger instance for this source
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def fetch(self, query: SongQuery) -> Optional[str]:
        """Look up raw LRC text for a song.

        Args:
            query: The song being resolved

        Returns:
            Optional[str]: Raw LRC text, or None if this source does not have it
        """
        pass

    def can_fetch(self, query: SongQuery) -> bool:
        """Check if this source has the input it needs for the query.

        Args:
            query: The song being resolved

        Returns:
            bool: True if this source can be consulted, False otherwise
        """
        if self.requires_song_id and query.song_id is None:
            self.logger.debug(f"{self.name} needs a song id, none resolved for {query.keywords}")
            return False
        return True
