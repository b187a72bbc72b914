from typing import Any


class LyricsError(Exception):
    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class NotFoundError(LyricsError):
    pass


class TransportError(LyricsError):
    pass


class MalformedError(LyricsError):
    pass


class StorageError(LyricsError):
    pass
