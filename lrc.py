"""
@file lrc.py
@brief LRC parsing, serialization and timestamp repair.

Time tags are integer milliseconds from the start of the track. A parsed
``Lyrics`` value keeps its timed lines ordered by time; lines sharing a
timestamp keep the order in which they were added.
"""
import bisect
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List

from exceptions import MalformedError


# [mm:ss.ccX] where X is a stray third fractional digit
_OVERLONG_TIME_TAG_RE = re.compile(r"\[(\d{2}:\d{2}\.\d{2})\d\]")

_TIME_TAG_RE = re.compile(
    r"""
    ^
    (?P<min>\d+)                # minutes
    :
    (?P<sec>[0-5]?\d)           # seconds
    (?:\.(?P<frac>\d{1,3}))?    # optional fraction
    $
    """,
    re.VERBOSE,
)

_LEADING_TAG_RE = re.compile(r"^\[([^\]]*)\]")
_ID_TAG_RE = re.compile(r"^(?P<key>[A-Za-z#]+):(?P<value>.*)$")
# Only ASCII line endings; str.splitlines would also break on U+2028 and friends
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def repair_timestamps(text: str) -> str:
    """Rewrite ``[MM:SS.CCx]`` time tags to ``[MM:SS.CC]``.

    Some providers emit three fractional digits where LRC expects two. The
    stray digit is dropped. Tags that are already well formed are left alone,
    so running this on repaired text returns it unchanged.

    Args:
        text: Raw LRC text

    Returns:
        str: Text with every overlong time tag shortened
    """
    return _OVERLONG_TIME_TAG_RE.sub(r"[\1]", text)


def parse_time_tag(tag: str) -> int:
    """Parse the inside of a time tag (``mm:ss.cc``) into milliseconds.

    Args:
        tag: Tag content without the brackets

    Returns:
        int: Milliseconds from track start

    Raises:
        MalformedError: If the tag is not a valid time tag
    """
    match = _TIME_TAG_RE.match(tag)
    if not match:
        raise MalformedError(f"Invalid time tag: [{tag}]", details=tag)

    minutes = int(match.group("min"))
    seconds = int(match.group("sec"))
    frac = match.group("frac") or ""
    # 1 digit = tenths, 2 = hundredths, 3 = milliseconds
    millis = int(frac.ljust(3, "0")) if frac else 0

    return (minutes * 60 + seconds) * 1000 + millis


def format_time_tag(time_tag: int) -> str:
    minutes, rest = divmod(time_tag, 60000)
    seconds, millis = divmod(rest, 1000)
    return f"{minutes:02d}:{seconds:02d}.{millis // 10:02d}"


@dataclass(frozen=True)
class TimedLine:
    """One synchronized lyric line. Empty text marks a pause."""
    time_tag: int
    text: str


class Lyrics:
    """An ordered sequence of timed lines plus LRC ID tags."""

    def __init__(self):
        self.metadata: Dict[str, str] = {}
        self._timed_lines: List[TimedLine] = []
        self._times: List[int] = []

    @classmethod
    def from_str(cls, text: str) -> 'Lyrics':
        """Parse LRC text.

        A line may carry several leading time tags, each producing a timed
        line with the same text. ID tags such as ``[ar:Artist]`` are stored in
        ``metadata``. Lines with no tag are ignored.

        Args:
            text: LRC text

        Returns:
            Lyrics: Parsed lyrics

        Raises:
            MalformedError: If a line starts with an invalid time tag
        """
        lyrics = cls()

        for line_no, raw_line in enumerate(_LINE_BREAK_RE.split(text), start=1):
            rest = raw_line.lstrip()
            time_tags: List[int] = []

            while True:
                match = _LEADING_TAG_RE.match(rest)
                if not match:
                    break

                content = match.group(1).strip()
                if _TIME_TAG_RE.match(content):
                    time_tags.append(parse_time_tag(content))
                elif content[:1].isdigit():
                    raise MalformedError(
                        f"Invalid time tag on line {line_no}: [{content}]",
                        details={"line": line_no, "tag": content}
                    )
                else:
                    id_match = _ID_TAG_RE.match(content)
                    if id_match and not time_tags:
                        key = id_match.group("key").strip().lower()
                        lyrics.metadata[key] = id_match.group("value").strip()
                    break

                rest = rest[match.end():]

            for time_tag in time_tags:
                lyrics.add_timed_line(time_tag, rest)

        return lyrics

    def add_timed_line(self, time_tag: int, text: str) -> None:
        """Insert a line, keeping the sequence ordered by time.

        Args:
            time_tag: Milliseconds from track start
            text: Line text

        Raises:
            ValueError: If the time is negative or the text spans several lines
        """
        if time_tag < 0:
            raise ValueError(f"Negative time tag: {time_tag}")
        if "\n" in text or "\r" in text:
            raise ValueError("Timed line text must be a single line")

        index = bisect.bisect_right(self._times, time_tag)
        self._times.insert(index, time_tag)
        self._timed_lines.insert(index, TimedLine(time_tag, text))

    def get_timed_lines(self) -> List[TimedLine]:
        return list(self._timed_lines)

    def to_lrc(self) -> str:
        lines = [f"[{key}:{value}]" for key, value in self.metadata.items()]
        lines.extend(
            f"[{format_time_tag(line.time_tag)}]{line.text}"
            for line in self._timed_lines
        )
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": dict(self.metadata),
            "lines": [
                {"time_ms": line.time_tag, "text": line.text}
                for line in self._timed_lines
            ],
        }

    def __iter__(self) -> Iterator[TimedLine]:
        return iter(self._timed_lines)

    def __len__(self) -> int:
        return len(self._timed_lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lyrics):
            return NotImplemented
        return self.metadata == other.metadata and self._timed_lines == other._timed_lines

    def __repr__(self) -> str:
        return f"Lyrics({len(self._timed_lines)} lines)"
