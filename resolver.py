"""
@file resolver.py
@brief Resolves synchronized lyrics for a song title and artist.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from base_source import SongQuery
from config import Settings
from exceptions import MalformedError
from lrc import Lyrics, repair_timestamps
from normalizer import normalize_lines, timing_offset_for
from sources.chain import SourceChain, build_chain


@dataclass(frozen=True)
class Outcome:
    """Result of a resolve call.

    ``changed`` is False when the call repeated the previous query and the
    caller should keep whatever lyrics it already shows. When ``changed`` is
    True, ``lyrics`` is the new value, or None for an explicit "no lyrics".
    """
    changed: bool
    lyrics: Optional[Lyrics] = None

    @classmethod
    def unchanged(cls) -> 'Outcome':
        return cls(changed=False)

    @classmethod
    def resolved(cls, lyrics: Optional[Lyrics]) -> 'Outcome':
        return cls(changed=True, lyrics=lyrics)


class LyricsResolver:
    """Turn a name/artist pair into clean, playback-ready lyrics.

    The resolver remembers the last query it was asked for. The query is
    recorded before lookup starts, so a failed lookup repeated with the same
    arguments comes back as unchanged instead of failing again.

    Not safe for concurrent use from several threads.
    """

    def __init__(
        self,
        chain: SourceChain,
        timing_overrides: Optional[Dict[str, int]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize LyricsResolver.

        Args:
            chain: Sources to fetch raw lyrics from
            timing_overrides: Lower-cased title to offset (ms) mapping
            logger: Logger instance
        """
        self.chain = chain
        self.timing_overrides = timing_overrides
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.last_query = ""

    @classmethod
    def from_settings(cls, settings: Settings, logger: Optional[logging.Logger] = None) -> 'LyricsResolver':
        return cls(build_chain(settings, logger), settings.TIMING_OVERRIDES, logger)

    def resolve(self, name: str, artist: str) -> Outcome:
        """Resolve lyrics for a song.

        Args:
            name: Song title
            artist: Artist name

        Returns:
            Outcome: Unchanged for a repeated query, otherwise the resolved lyrics
                (None when name or artist is empty)

        Raises:
            NotFoundError: If no source has the song
            TransportError: If the remote service failed
            MalformedError: If a response or the LRC text could not be parsed
            StorageError: If the cache or database could not be read
        """
        query = f"{name} {artist}"
        if query == self.last_query:
            return Outcome.unchanged()
        self.last_query = query

        if not name or not artist:
            return Outcome.resolved(None)

        self.logger.info(query)
        raw_lyrics = self.chain.fetch(SongQuery(name=name, artist=artist))
        lyrics = self.build_lyrics(raw_lyrics, name)
        self.logger.info("OK")

        return Outcome.resolved(lyrics)

    def build_lyrics(self, raw_lyrics: str, name: str) -> Lyrics:
        """Repair, parse and normalize raw LRC text.

        Args:
            raw_lyrics: LRC text as returned by a source
            name: Song title, used to pick a timing correction

        Returns:
            Lyrics: Clean lyrics

        Raises:
            MalformedError: If the text is not valid LRC
        """
        try:
            parsed = Lyrics.from_str(repair_timestamps(raw_lyrics))
        except MalformedError as e:
            self.logger.error(f"Failed to parse lyrics: {e.message}")
            raise

        offset = timing_offset_for(name, self.timing_overrides)
        if offset:
            self.logger.debug(f"Applying {offset} ms timing correction to {name!r}")

        try:
            lyrics = normalize_lines(parsed.get_timed_lines(), offset)
        except ValueError as e:
            raise MalformedError("Lyrics contain an invalid line", details=str(e)) from e

        lyrics.metadata.update(parsed.metadata)
        return lyrics
