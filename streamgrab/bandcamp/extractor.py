"""
Bandcamp page metadata extraction.

Album and track pages embed their data as a JavaScript object literal:

    var TralbumData = {
        current: {..., title: "Album Title", ...},
        artist: "Artist Name",
        trackinfo: [
            {"file": {"mp3-128": "//t4.bcbits.com/stream/..."},
             "title": "Night Drive", "title_link": "/track/night-drive",
             "duration": 241.3, ...},
            ...
        ],
        ...
    };

Newer pages carry the same data as HTML-escaped JSON in a
data-tralbum="..." attribute; both are understood.

The TralbumData literal is read with patterns; page markup (the
data-tralbum attribute, catalog links) goes through BeautifulSoup.
The rest of the system only sees RawAlbumMetadata.

Rules:
    - artist: first quoted value after an "artist" key, "Unknown Artist"
      if there is none
    - title: first quoted value after a "title" key (required)
    - per track: every "mp3-128" stream, every "title_link" slug and every
      "duration" number. Track titles come from title_link because the
      plain "title" key also appears in unrelated nested objects.
    - the three per-track lists must have the same length, otherwise the
      whole album is rejected
    - an unparseable duration becomes 0
"""

import json
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from streamgrab.bandcamp.models import (
    AlbumTrackEntry,
    RawAlbumMetadata,
    normalize_stream_url,
)
from streamgrab.core.exceptions import MalformedAlbumError, NoAlbumFoundError
from streamgrab.core.models import UNKNOWN_ARTIST

__all__ = [
    "extract_album",
    "find_album_block",
    "find_album_paths",
    "normalize_stream_url",
]


_TRALBUM_PREFIX_RE = re.compile(r"var\s+TralbumData\s*=\s*")

# A quoted string body, allowing backslash escapes
_QUOTED = r'"((?:[^"\\]|\\.)*)"'

# Keys may be bare (JS literal) or quoted (JSON); the lookbehind stops
# "title" matching inside "album_title" and similar
_ARTIST_RE = re.compile(r'(?<![\w-])"?artist"?\s*:\s*' + _QUOTED)
_TITLE_RE = re.compile(r'(?<![\w-])"?title"?\s*:\s*' + _QUOTED)
_STREAM_RE = re.compile(r'"?mp3-128"?\s*:\s*' + _QUOTED)
_TITLE_LINK_RE = re.compile(r'"?title_link"?\s*:\s*"\\?/track\\?/((?:[^"\\]|\\.)*)"')
_DURATION_RE = re.compile(r'(?<![\w-])"?duration"?\s*:\s*([^,}\]\s]*)')

_ALBUM_PATH_PREFIXES = ("/album/", "/track/")

_OPENERS = "{[("
_CLOSERS = "}])"
_QUOTES = "\"'`"


def _unescape(value: str) -> str:
    """Decode JSON/JS string escapes, keeping the raw text if it isn't valid."""
    try:
        return json.loads(f'"{value}"')
    except ValueError:
        return value


def _read_statement(text: str, start: int) -> str | None:
    """
    Return text[start:end] where end is the first ';' at nesting depth 0.

    Brackets are counted, and quoted strings and comments are skipped,
    so a ';' inside a string or a nested object does not end the block.
    Returns None if the statement never terminates.
    """
    depth = 0
    quote: str | None = None
    i = start
    length = len(text)

    while i < length:
        char = text[i]

        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            if newline == -1:
                return None
            i = newline
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                return None
            i = end + 2
            continue
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            return text[start:i]

        i += 1

    return None


def find_album_block(body: str) -> str:
    """
    Locate the embedded album data in a page body.

    Args:
        body: Full HTML of an album or track page.

    Returns:
        The text of the embedded object (without the assignment and the
        trailing ';'), or the unescaped data-tralbum JSON.

    Raises:
        NoAlbumFoundError: If the page embeds neither form.
    """
    match = _TRALBUM_PREFIX_RE.search(body)
    if match is not None:
        block = _read_statement(body, match.end())
        if block is not None:
            return block

    tag = BeautifulSoup(body, "lxml").select_one("[data-tralbum]")
    if tag is not None:
        return tag["data-tralbum"]

    raise NoAlbumFoundError("No album found")


def _parse_duration(raw: str) -> int:
    try:
        return max(int(float(raw)), 0)
    except (ValueError, OverflowError):
        return 0


def extract_album(body: str) -> RawAlbumMetadata:
    """
    Extract album metadata from an album or track page.

    Args:
        body: Full HTML of the page.

    Returns:
        RawAlbumMetadata with one entry per track, in page order.

    Raises:
        NoAlbumFoundError: If the page has no embedded album data.
        MalformedAlbumError: If the album has no title, or the stream,
                             title and duration lists differ in length.
                             No tracks are returned in that case.

    Example:
        album = extract_album(requests.get(url).text)
        print(album.title, len(album.entries))
    """
    block = find_album_block(body)

    artist_match = _ARTIST_RE.search(block)
    artist = _unescape(artist_match.group(1)) if artist_match else ""

    title_match = _TITLE_RE.search(block)
    if title_match is None:
        raise MalformedAlbumError("Album data has no title")
    title = _unescape(title_match.group(1))

    streams = _STREAM_RE.findall(block)
    titles = _TITLE_LINK_RE.findall(block)
    durations = _DURATION_RE.findall(block)

    if not (len(streams) == len(titles) == len(durations)):
        raise MalformedAlbumError(
            f"Track field count mismatch "
            f"(streams={len(streams)}, titles={len(titles)}, durations={len(durations)})",
            details={
                "album": title,
                "streams": len(streams),
                "titles": len(titles),
                "durations": len(durations),
            }
        )

    entries = tuple(
        AlbumTrackEntry(
            stream_path=_unescape(stream),
            title_slug=_unescape(slug),
            duration=_parse_duration(duration),
        )
        for stream, slug, duration in zip(streams, titles, durations)
    )

    return RawAlbumMetadata(
        artist=artist or UNKNOWN_ARTIST,
        title=title,
        entries=entries,
    )


def _is_album_path(href: str) -> bool:
    parsed = urlparse(href)
    if parsed.scheme not in ("", "http", "https"):
        return False
    return any(
        parsed.path.startswith(prefix) and len(parsed.path) > len(prefix)
        for prefix in _ALBUM_PATH_PREFIXES
    )


def find_album_paths(body: str) -> list[str]:
    """
    Find every album/track link on an artist or label page.

    Args:
        body: Full HTML of the profile page.

    Returns:
        Link targets (relative paths or absolute URLs) in document order,
        duplicates removed.
    """
    soup = BeautifulSoup(body, "lxml")
    paths: dict[str, None] = {}

    for link in soup.select("a[href]"):
        href = link["href"].strip()
        if _is_album_path(href):
            paths.setdefault(href, None)

    return list(paths)
