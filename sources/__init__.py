from .chain import SourceChain, build_chain
from .database_source import DatabaseSource
from .file_cache_source import FileCacheSource
from .netease_source import NeteaseSource

__all__ = [
    "SourceChain",
    "build_chain",
    "DatabaseSource",
    "FileCacheSource",
    "NeteaseSource"
]
