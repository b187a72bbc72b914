#!/usr/bin/env python3
"""
@file lyricsync.py
@brief Command-line interface for the lyricsync application.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from config import Settings, get_settings
from exceptions import LyricsError
from lrc import Lyrics, format_time_tag
from resolver import LyricsResolver, Outcome
from song import Song
from sources.database_source import add_song, initialize_database
from utils.logging_utils import setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        argparse.Namespace: Parsed arguments
    """
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description=f"{settings.APP_NAME} {settings.VERSION} - {settings.DESCRIPTION}"
    )

    # Song selection
    song_group = parser.add_argument_group('Song')
    song_group.add_argument('-n', '--name', default='', help="Song title")
    song_group.add_argument('-a', '--artist', default='', help="Artist name")
    song_group.add_argument(
        '-i', '--input',
        help="FLAC file to read title and artist tags from"
    )
    song_group.add_argument(
        '--watch',
        action='store_true',
        help="Read 'title<TAB>artist' lines from stdin and print lyrics whenever they change"
    )

    # Sources
    source_group = parser.add_argument_group('Source Options')
    source_group.add_argument(
        '--sources',
        help=f"Comma-separated source order (default: {','.join(settings.SOURCES)})"
    )
    source_group.add_argument(
        '--api-url',
        help=f"Search/lyric API base URL (default: {settings.API_BASE_URL})"
    )
    source_group.add_argument('--cache-dir', help="Directory of <song id>.lrc files")
    source_group.add_argument('--db-path', help="SQLite lyrics database")
    source_group.add_argument(
        '--db-add',
        metavar='LRC_FILE',
        help="Store an LRC file in the database under --name/--artist and exit"
    )

    # Output
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '--format',
        choices=['lrc', 'json', 'text'],
        default='lrc',
        help="Output format (default: lrc)"
    )
    output_group.add_argument(
        '--embed',
        action='store_true',
        help="Write the lyrics into the --input file's tags"
    )

    # REST API
    api_group = parser.add_argument_group('REST API Options')
    api_group.add_argument('--api', action='store_true', help="Start the REST API server")
    api_group.add_argument('--api-host', default='127.0.0.1', help="API server host (default: 127.0.0.1)")
    api_group.add_argument('--api-port', type=int, default=8000, help="API server port (default: 8000)")

    # Debugging
    debug_group = parser.add_argument_group('Debugging Options')
    debug_group.add_argument('-v', '--verbose', action='store_true', help="Enable verbose logging")
    debug_group.add_argument('--log-file', help="Also write logs to this file")
    debug_group.add_argument('--log', action='store_true', help="Also write logs to lyricsync.log in the log directory")

    parser.add_argument(
        '--version',
        action='version',
        version=f"{settings.APP_NAME} {settings.VERSION}"
    )

    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of the environment settings."""
    overrides = {}
    if args.sources:
        overrides['SOURCES'] = [name.strip() for name in args.sources.split(',') if name.strip()]
    if args.api_url:
        overrides['API_BASE_URL'] = args.api_url
    if args.cache_dir:
        overrides['LRC_CACHE_DIR'] = args.cache_dir
    if args.db_path:
        overrides['LYRICS_DB_PATH'] = args.db_path
    return get_settings().model_copy(update=overrides)


def format_lyrics(lyrics: Optional[Lyrics], output_format: str) -> str:
    if lyrics is None:
        return "" if output_format != 'json' else "null"
    if output_format == 'json':
        return json.dumps(lyrics.to_dict(), ensure_ascii=False, indent=2)
    if output_format == 'text':
        return "\n".join(f"{format_time_tag(line.time_tag)}  {line.text}" for line in lyrics)
    return lyrics.to_lrc()


def watch(resolver: LyricsResolver, stream: TextIO, output_format: str, logger: logging.Logger) -> int:
    """Resolve each 'title<TAB>artist' line, printing only when the result changes.

    Errors are logged and the loop keeps going; the failed query is not retried
    until a different song comes in between.
    """
    for raw_line in stream:
        name, _, artist = raw_line.rstrip("\r\n").partition("\t")
        try:
            outcome = resolver.resolve(name.strip(), artist.strip())
        except LyricsError as e:
            logger.error(f"{name} - {artist}: {e.message}")
            continue

        if outcome.changed:
            print(format_lyrics(outcome.lyrics, output_format), flush=True)

    return 0


def resolve_once(args: argparse.Namespace, resolver: LyricsResolver, logger: logging.Logger) -> int:
    name, artist = args.name, args.artist
    song = None

    if args.input:
        song = Song(args.input, logger)
        name = name or song.title
        artist = artist or song.artist
        logger.info(f"Read tags from {song}: {artist} - {name}")

    outcome: Outcome = resolver.resolve(name, artist)
    if outcome.lyrics is None:
        logger.error("Title and artist are both required")
        return 1

    if args.embed:
        if song is None:
            logger.error("--embed requires --input")
            return 1
        song.embed_lyrics(outcome.lyrics)

    print(format_lyrics(outcome.lyrics, args.format))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main function.

    Returns:
        int: Exit code
    """
    args = parse_args(argv)
    logger = setup_logging(args.verbose, args.log_file, args.log)

    try:
        settings = settings_from_args(args)

        if args.api:
            import uvicorn

            logger.info(f"Starting API server on {args.api_host}:{args.api_port}")
            uvicorn.run(
                "api:app",
                host=args.api_host,
                port=args.api_port,
                log_level="debug" if args.verbose else "info"
            )
            return 0

        if args.db_add:
            if not settings.LYRICS_DB_PATH or not args.name or not args.artist:
                logger.error("--db-add requires --db-path, --name and --artist")
                return 1
            initialize_database(settings.LYRICS_DB_PATH)
            add_song(
                settings.LYRICS_DB_PATH, args.name, args.artist,
                Path(args.db_add).read_text(encoding='utf-8')
            )
            logger.info(f"Stored {args.db_add} as {args.artist} - {args.name}")
            return 0

        resolver = LyricsResolver.from_settings(settings, logger)

        if args.watch:
            return watch(resolver, sys.stdin, args.format, logger)

        return resolve_once(args, resolver, logger)

    except LyricsError as e:
        logger.error(f"{e.__class__.__name__}: {e.message}")
        return 1

    except (ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
