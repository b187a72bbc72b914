"""Test configuration and fixtures.

Provides reusable fixtures for:
- Sample LRC text
- A fake ``requests.get`` serving the search and lyric endpoints
- A SQLite lyrics database and an LRC cache directory
- Stub sources with canned results
"""

import sqlite3
from contextlib import closing
from typing import Dict, List, Optional

import pytest
import requests

from base_source import BaseSource, SongQuery
from sources import netease_source
from sources.database_source import initialize_database


SAMPLE_LRC = """[ar:Test Artist]
[ti:Test Song]
[00:01.000]
[00:02.500]First line
[00:10.00]
[00:15.00]Second &amp; last line
"""


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, invalid_json=False):
        self._json_data = json_data
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json_data


class FakeHttp:
    """Routes GET requests by endpoint name to canned responses."""

    def __init__(self):
        self.routes: Dict[str, object] = {}
        self.calls: List[tuple] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, timeout))
        endpoint = url.rsplit("/", 1)[-1]
        response = self.routes.get(endpoint)
        if response is None:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        if isinstance(response, Exception):
            raise response
        return response

    def endpoints_called(self) -> List[str]:
        return [url.rsplit("/", 1)[-1] for url, _, _ in self.calls]


def search_payload(*songs):
    return {"result": {"songs": list(songs)}}


def song_payload(song_id: int, name: str, *artists: str):
    return {"id": song_id, "name": name, "artists": [{"name": a} for a in artists]}


def lyric_payload(lyric: Optional[str]):
    return {"lrc": {"lyric": lyric}}


class StubSource(BaseSource):
    """Source returning a canned result, or raising a canned error."""

    def __init__(self, result=None, requires_song_id=False):
        super().__init__()
        self.result = result
        self.requires_song_id = requires_song_id
        self.queries: List[SongQuery] = []

    def fetch(self, query):
        self.queries.append(query)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def sample_lrc():
    return SAMPLE_LRC


@pytest.fixture
def fake_http(monkeypatch):
    http = FakeHttp()
    monkeypatch.setattr(netease_source.requests, "get", http.get)
    return http


@pytest.fixture
def payloads():
    """Builders for search and lyric endpoint payloads."""

    class Payloads:
        search = staticmethod(search_payload)
        song = staticmethod(song_payload)
        lyric = staticmethod(lyric_payload)
        response = FakeResponse

    return Payloads


@pytest.fixture
def stub_source():
    return StubSource


@pytest.fixture
def lyrics_db(tmp_path):
    """Create an empty lyrics database and return a helper to insert rows."""
    db_path = tmp_path / "lyrics.sqlite3"
    initialize_database(db_path)

    def insert(name, artist, lyrics):
        with closing(sqlite3.connect(str(db_path))) as db:
            db.execute(
                "INSERT INTO songs (name, artist, lyrics) VALUES (?, ?, ?)",
                (name, artist, lyrics)
            )
            db.commit()

    insert.path = db_path
    return insert


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "lrclib"
    path.mkdir()
    return path
