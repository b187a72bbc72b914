"""
@file normalizer.py
@brief Cleanup of parsed timed lines into playback-ready lyrics.
"""
import html
from typing import Dict, List, Optional

from lrc import Lyrics, TimedLine

# Blank lines followed by the next line within this many ms are dropped
BLANK_LINE_MAX_GAP_MS = 3000

DEFAULT_TIMING_OVERRIDES: Dict[str, int] = {"shanghai breezes": -5000}


def timing_offset_for(name: str, overrides: Optional[Dict[str, int]] = None) -> int:
    """Get the timing correction for a song title.

    Args:
        name: Requested song title
        overrides: Lower-cased title to offset (ms) mapping

    Returns:
        int: Offset in milliseconds to add to every time tag, 0 if none applies
    """
    if overrides is None:
        overrides = DEFAULT_TIMING_OVERRIDES
    return overrides.get(name.lower(), 0)


def normalize_lines(timed_lines: List[TimedLine], offset_ms: int = 0) -> Lyrics:
    """Build clean lyrics from parsed timed lines.

    Text is HTML-unescaped and trimmed. A blank line is dropped when it is
    not the last line and the next line starts within
    ``BLANK_LINE_MAX_GAP_MS``; longer blanks are kept as pause markers.
    ``offset_ms`` is applied to each kept line, clamped at zero. Gaps are
    measured on the uncorrected times.

    Args:
        timed_lines: Parsed lines in playback order
        offset_ms: Timing correction in milliseconds

    Returns:
        Lyrics: New lyrics value; the input is not modified
    """
    lyrics = Lyrics()
    last_index = len(timed_lines) - 1

    for i, line in enumerate(timed_lines):
        text = html.unescape(line.text).strip()

        if not text and i < last_index:
            gap = timed_lines[i + 1].time_tag - line.time_tag
            if gap <= BLANK_LINE_MAX_GAP_MS:
                continue

        lyrics.add_timed_line(max(0, line.time_tag + offset_ms), text)

    return lyrics
