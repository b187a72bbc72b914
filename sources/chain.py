"""
@file chain.py
@brief Source chain that tries multiple lyrics sources in sequence.
"""
import logging
from typing import Callable, List, Optional

from base_source import BaseSource, SongQuery
from config import Settings
from exceptions import NotFoundError
from sources.database_source import DatabaseSource
from sources.file_cache_source import FileCacheSource
from sources.netease_source import NeteaseSource

SOURCE_NAMES = ["file_cache", "database", "netease"]


class SourceChain:
    """Try each source in order until one returns lyrics.

    A source returning None falls through to the next one. Errors raised
    by a source stop the chain and propagate unchanged.
    """

    def __init__(
        self,
        sources: List[BaseSource],
        id_resolver: Optional[Callable[[SongQuery], Optional[int]]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize SourceChain.

        Args:
            sources: Sources in priority order
            id_resolver: Callable filling in ``song_id`` for id-keyed sources
            logger: Logger instance
        """
        self.sources = sources
        self.id_resolver = id_resolver
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def fetch(self, query: SongQuery) -> str:
        """Get raw LRC text from the first source that has it.

        Args:
            query: The song being resolved

        Returns:
            str: Raw LRC text

        Raises:
            NotFoundError: If no source has the song
            LyricsError: Whatever a source raised
        """
        for source in self.sources:
            if source.requires_song_id and not query.searched and self.id_resolver:
                self.id_resolver(query)

            if not source.can_fetch(query):
                continue

            self.logger.info(f"Trying to fetch lyrics with {source.name}")
            lyrics = source.fetch(query)
            if lyrics is not None:
                self.logger.info(f"Successfully found lyrics with {source.name}")
                return lyrics

            self.logger.debug(f"No lyrics found with {source.name}")

        self.logger.warning(f"Could not find lyrics from any source for {query.keywords}")
        raise NotFoundError(f"Song not found: {query.keywords}")


def build_chain(settings: Settings, logger: Optional[logging.Logger] = None) -> SourceChain:
    """Build the source chain named by ``settings.SOURCES``.

    Args:
        settings: Application settings
        logger: Logger instance shared by the sources

    Returns:
        SourceChain: Chain with sources in configured order

    Raises:
        ValueError: If a source name is unknown or no source is usable
    """
    chain_logger = logger or logging.getLogger(SourceChain.__name__)
    sources: List[BaseSource] = []
    netease: Optional[NeteaseSource] = None

    for source_name in settings.SOURCES:
        if source_name == "file_cache":
            if not settings.LRC_CACHE_DIR:
                chain_logger.warning("file_cache source skipped, LRC_CACHE_DIR is not set")
                continue
            sources.append(FileCacheSource(settings.LRC_CACHE_DIR, logger))
        elif source_name == "database":
            if not settings.LYRICS_DB_PATH:
                chain_logger.warning("database source skipped, LYRICS_DB_PATH is not set")
                continue
            sources.append(DatabaseSource(settings.LYRICS_DB_PATH, logger))
        elif source_name == "netease":
            netease = NeteaseSource(
                base_url=settings.API_BASE_URL,
                timeout=settings.REQUEST_TIMEOUT,
                user_agent=settings.USER_AGENT,
                logger=logger
            )
            sources.append(netease)
        else:
            raise ValueError(f"Unknown lyrics source '{source_name}', expected one of {SOURCE_NAMES}")

    if not sources:
        raise ValueError("No lyrics sources configured")

    id_resolver = netease.search_song_id if netease else None
    return SourceChain(sources, id_resolver=id_resolver, logger=logger)
