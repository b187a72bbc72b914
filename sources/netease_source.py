"""
@file netease_source.py
@brief Source fetching lyrics from a NetEase-compatible music API.
"""
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from base_source import BaseSource, SongQuery
from exceptions import MalformedError, TransportError


class Artist(BaseModel):
    name: str


class SongCandidate(BaseModel):
    id: int
    name: str
    artists: List[Artist] = []

    @property
    def artist_names(self) -> List[str]:
        return [artist.name for artist in self.artists]


class SearchResultInner(BaseModel):
    songs: List[SongCandidate] = []


class SearchResult(BaseModel):
    result: SearchResultInner


class Lrc(BaseModel):
    lyric: str


class LyricsResponse(BaseModel):
    lrc: Lrc


def select_song(songs: List[SongCandidate], artist: str) -> Optional[SongCandidate]:
    """Pick the first song credited to exactly ``artist``.

    Matching is case-sensitive and does not trim whitespace.

    Args:
        songs: Search results in API order
        artist: Requested artist name

    Returns:
        Optional[SongCandidate]: The first matching song, None if none match
    """
    for song in songs:
        if artist in song.artist_names:
            return song
    return None


class NeteaseSource(BaseSource):
    """Handle lyrics lookups against the search and lyric endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        user_agent: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize NeteaseSource.

        Args:
            base_url: Root URL of the API server
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header value
            logger: Logger instance
        """
        super().__init__(logger)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent} if user_agent else {}

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        self.logger.debug(f"NetEase request: {url} {params}")

        try:
            response = requests.get(url, params=params, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Error requesting {url}: {e}")
            raise TransportError(f"Request to {url} failed", details=str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON from {url}: {e}")
            raise MalformedError(f"Invalid JSON from {url}", details=str(e)) from e

    def search_song_id(self, query: SongQuery) -> Optional[int]:
        """Resolve the song id for a query via the search endpoint.

        The result is stored on the query so later sources reuse it.

        Args:
            query: The song being resolved

        Returns:
            Optional[int]: Id of the first song by the requested artist, None if none match
        """
        if query.searched:
            return query.song_id

        self.logger.info(f"Searching NetEase for: {query.keywords}")
        data = self._get_json("search", {"keywords": query.keywords})

        try:
            search_result = SearchResult.model_validate(data)
        except ValidationError as e:
            raise MalformedError("Unexpected search response", details=str(e)) from e

        song = select_song(search_result.result.songs, query.artist)
        query.searched = True
        query.song_id = song.id if song else None

        if song is None:
            self.logger.warning(f"No search result credited to {query.artist!r}")
        else:
            self.logger.debug(f"Matched song {song.id}: {song.name}")

        return query.song_id

    def get_song_lyrics(self, song_id: int) -> str:
        """Get raw LRC lyrics for a specific song by ID.

        Args:
            song_id: NetEase song ID

        Returns:
            str: Raw LRC text, empty if the song has no timed lyrics

        Raises:
            MalformedError: If the response has no lrc.lyric field
        """
        data = self._get_json("lyric", {"id": song_id})

        try:
            lyrics_response = LyricsResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedError("Unexpected lyric response", details=str(e)) from e

        if not lyrics_response.lrc.lyric:
            self.logger.debug(f"Song {song_id} has empty LRC lyrics")

        return lyrics_response.lrc.lyric

    def fetch(self, query: SongQuery) -> Optional[str]:
        song_id = self.search_song_id(query)
        if song_id is None:
            return None

        lyrics = self.get_song_lyrics(song_id)
        if lyrics:
            self.logger.info(f"Found lyrics from NetEase for {query.keywords}")
        return lyrics
