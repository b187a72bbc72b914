"""
@file api.py
@brief REST API for the lyricsync application.
"""
import logging
import threading
from collections import OrderedDict
from functools import lru_cache
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import get_settings
from exceptions import LyricsError, NotFoundError, StorageError
from resolver import LyricsResolver
from sources.chain import SourceChain, build_chain

settings = get_settings()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description=settings.DESCRIPTION,
    version=settings.VERSION
)

logger = logging.getLogger("lyricsync-api")

# Sync endpoints run in a thread pool; resolvers are single-threaded
_resolver_lock = threading.Lock()


# Models
class LyricLine(BaseModel):
    """A single timed lyric line"""
    time_ms: int
    text: str


class LyricsResponse(BaseModel):
    """Result of a lyrics lookup.

    ``changed`` is false when the request repeated the previous one from the
    same session; clients keep what they already display.
    """
    changed: bool
    lines: Optional[List[LyricLine]] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[str] = None


class ResolverSessions:
    """One resolver per client session, oldest dropped past ``max_sessions``."""

    def __init__(self, max_sessions: int = 256):
        self.max_sessions = max_sessions
        self._resolvers: "OrderedDict[str, LyricsResolver]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str, factory: Callable[[], LyricsResolver]) -> LyricsResolver:
        with self._lock:
            resolver = self._resolvers.get(session_id)
            if resolver is not None:
                self._resolvers.move_to_end(session_id)
                return resolver

            resolver = factory()
            self._resolvers[session_id] = resolver
            if len(self._resolvers) > self.max_sessions:
                expired, _ = self._resolvers.popitem(last=False)
                logger.debug(f"Dropped resolver for session {expired}")
            return resolver

    def clear(self) -> None:
        with self._lock:
            self._resolvers.clear()

    def __len__(self) -> int:
        return len(self._resolvers)


sessions = ResolverSessions()


@lru_cache()
def get_chain() -> SourceChain:
    return build_chain(get_settings(), logger)


def get_resolver(
    session: Optional[str] = Header(None, alias="X-Session-Id"),
    chain: SourceChain = Depends(get_chain)
) -> LyricsResolver:
    """Resolver for the calling client.

    Requests without an ``X-Session-Id`` header get a fresh resolver, so they
    are never reported as unchanged.
    """
    def factory() -> LyricsResolver:
        return LyricsResolver(chain, settings.TIMING_OVERRIDES, logger)

    if not session:
        return factory()
    return sessions.get(session, factory)


def status_code_for(exc: LyricsError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, StorageError):
        return 500
    # Transport and malformed upstream data
    return 502


@app.exception_handler(LyricsError)
async def lyrics_exception_handler(request: Request, exc: LyricsError):
    logger.warning(f"{request.url.path} failed: {exc.message}")
    content = ErrorResponse(
        error=exc.__class__.__name__,
        message=exc.message,
        details=str(exc.details) if exc.details is not None else None
    )
    return JSONResponse(status_code=status_code_for(exc), content=content.model_dump())


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "description": settings.DESCRIPTION,
        "sources": settings.SOURCES
    }


@app.get("/lyrics", response_model=LyricsResponse)
def get_lyrics(
    name: str = Query("", description="Song title"),
    artist: str = Query("", description="Artist name"),
    resolver: LyricsResolver = Depends(get_resolver)
):
    with _resolver_lock:
        outcome = resolver.resolve(name, artist)

    if outcome.lyrics is None:
        return LyricsResponse(changed=outcome.changed)

    return LyricsResponse(
        changed=outcome.changed,
        lines=[LyricLine(time_ms=line.time_tag, text=line.text) for line in outcome.lyrics]
    )
