"""
@file song.py
@brief Class representing a FLAC audio file whose tags drive lyrics lookup.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from mutagen.flac import FLAC

from lrc import Lyrics


class Song:
    """A FLAC file with the title/artist tags used for lyrics lookup.

    Lyrics can be written back as ``SYNCEDLYRICS`` (LRC) and ``LYRICS``
    (plain text) Vorbis comments.
    """

    def __init__(self, filepath: Union[str, Path], logger: Optional[logging.Logger] = None):
        """Initialize a Song object.

        Args:
            filepath: Path to the FLAC file
            logger: Logger instance
        """
        self.filepath = Path(filepath)
        self.logger = logger or logging.getLogger(__name__)

        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")

        if self.filepath.suffix.lower() != '.flac':
            raise ValueError(f"Not a FLAC file: {self.filepath}")

        self.audio = FLAC(str(self.filepath))
        self.logger.debug(f"Loaded FLAC file: {self.filepath}")

    def _first_tag(self, key: str) -> str:
        # Mutagen returns lists for tag values
        values = self.audio.get(key) or ['']
        return values[0]

    @property
    def title(self) -> str:
        return self._first_tag('title')

    @property
    def artist(self) -> str:
        return self._first_tag('artist')

    def embed_lyrics(self, lyrics: Lyrics) -> None:
        """Write lyrics into the file's tags and save it.

        Args:
            lyrics: Lyrics to embed
        """
        self.audio['syncedlyrics'] = [lyrics.to_lrc()]
        self.audio['lyrics'] = ["\n".join(line.text for line in lyrics if line.text)]
        self.audio.save()
        self.logger.info(f"Embedded {len(lyrics)} lyric lines into {self.filepath}")

    def __str__(self) -> str:
        return f"Song({self.filepath})"
