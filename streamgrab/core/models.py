"""
Data models shared by every site integration.

This module defines the immutable dataclasses that flow through the
pipeline: the canonical Track written to playlists, the ResourceReference
produced by the classifier, the Playlist handed to the writer, and the
PlaylistOutcome reported back to the caller.

Design Decisions:
    - All dataclasses are frozen (immutable) to prevent accidental modification
    - Track is only built by the normalization helpers, never by hand
      in fetchers, so every site ends up with the same shape
    - Models know nothing about HTTP, HTML or files
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from streamgrab.core.config import DEFAULT_API_BASE
from streamgrab.core.exceptions import StreamGrabError


UNKNOWN_ARTIST = "Unknown Artist"


class Site(Enum):
    """Music hosting site a URL belongs to."""
    SOUNDCLOUD = "soundcloud"
    BANDCAMP = "bandcamp"


class ResourceKind(Enum):
    """
    What a URL points to.

    Bandcamp album and track pages are handled identically and both
    classify as ALBUM. CATALOG is a Bandcamp artist or label landing page.
    """
    TRACK = "track"
    PLAYLIST = "playlist"
    USER = "user"
    ALBUM = "album"
    CATALOG = "catalog"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Track:
    """
    Canonical track written to playlist files.

    Attributes:
        stream: Absolute URL the player fetches audio from.
                SoundCloud streams already carry the client_id parameter.
        duration: Length in whole seconds, never negative.
        title: Track title as displayed in the playlist.
        artist: Artist name as displayed in the playlist.
    """
    stream: str
    duration: int
    title: str
    artist: str

    @property
    def display_name(self) -> str:
        """The "Title - Artist" string used in #EXTINF lines."""
        return f"{self.title} - {self.artist}"

    @classmethod
    def from_soundcloud_api(
        cls,
        track_data: dict[str, Any],
        client_id: str,
        api_base: str = DEFAULT_API_BASE
    ) -> "Track":
        """
        Create a Track from a SoundCloud API track object.

        Args:
            track_data: Track object as returned by /tracks/<id> or found
                        inside playlist and collection responses.
            client_id: API credential appended to the stream URL. The
                       stream endpoint rejects requests without it.
            api_base: Used to build the stream URL when the record has none.

        Returns:
            Track: Normalized track.

        Behavior:
            - duration (milliseconds) becomes whole seconds, truncated
            - artist is the uploader's username
            - stream_url gets client_id=<client_id> as a query parameter

        Example:
            track = Track.from_soundcloud_api(
                {"id": 42, "title": "Song", "duration": 180000,
                 "stream_url": "https://api.soundcloud.com/tracks/42/stream",
                 "user": {"username": "Band"}},
                client_id="abc"
            )
            # Track(stream=".../stream?client_id=abc", duration=180, ...)
        """
        stream_url = track_data.get("stream_url")
        if not stream_url:
            stream_url = f"{api_base}/tracks/{track_data.get('id')}/stream"

        user = track_data.get("user") or {}

        return cls(
            stream=append_client_id(stream_url, client_id),
            duration=milliseconds_to_seconds(track_data.get("duration")),
            title=track_data.get("title") or "",
            artist=user.get("username") or UNKNOWN_ARTIST,
        )


def milliseconds_to_seconds(duration_ms: Any) -> int:
    """
    Convert a millisecond duration to whole seconds (floor).

    Missing or non-numeric values become 0, as do negative ones.

    Examples:
        milliseconds_to_seconds(125000)  # 125
        milliseconds_to_seconds(125999)  # 125
        milliseconds_to_seconds(None)    # 0
    """
    try:
        seconds = int(duration_ms) // 1000
    except (TypeError, ValueError):
        return 0
    return max(seconds, 0)


def append_client_id(url: str, client_id: str) -> str:
    """
    Return url with client_id set as a query parameter.

    Existing query parameters are kept; an existing client_id is replaced
    so the parameter is never duplicated.

    Examples:
        append_client_id("https://api.soundcloud.com/tracks/1/stream", "abc")
        # "https://api.soundcloud.com/tracks/1/stream?client_id=abc"
    """
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != "client_id"
    ]
    query.append(("client_id", client_id))
    return urlunsplit(parts._replace(query=urlencode(query)))


@dataclass(frozen=True)
class ResourceReference:
    """
    A classified URL.

    Attributes:
        site: Which site the URL belongs to.
        kind: What the URL points to.
        locator: The URL as given (or as discovered during a catalog scan).
        id: Numeric SoundCloud id; None for Bandcamp resources.
    """
    site: Site
    kind: ResourceKind
    locator: str
    id: int | None = None


@dataclass(frozen=True)
class Playlist:
    """
    One playlist file's worth of tracks.

    Attributes:
        label: Human-readable name the filename is derived from,
               e.g. "(Playlist) Night Drive by someone".
        tracks: Tracks in the order they will be written.
    """
    label: str
    tracks: tuple[Track, ...]

    @property
    def is_empty(self) -> bool:
        return not self.tracks


@dataclass(frozen=True)
class PlaylistOutcome:
    """
    Result of turning one resource into one playlist file.

    Exactly one of these holds:
        - written: path is set
        - skipped: no path and no error (the playlist was empty)
        - failed: error is set (only produced during fan-out)

    Attributes:
        label: Playlist label, or the source when it failed before
               a label was known.
        source: URL or id the playlist was built from.
        path: Written file.
        track_count: Number of tracks written.
        error: Why the resource could not be turned into a playlist.
    """
    label: str
    source: str
    path: Path | None = None
    track_count: int = 0
    error: StreamGrabError | None = None

    @property
    def written(self) -> bool:
        return self.path is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def skipped(self) -> bool:
        return self.path is None and self.error is None

    @classmethod
    def from_error(cls, source: str, error: StreamGrabError) -> "PlaylistOutcome":
        return cls(label=source, source=source, error=error)
