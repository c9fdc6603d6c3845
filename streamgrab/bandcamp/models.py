"""
Data models for Bandcamp album pages.

RawAlbumMetadata is the only thing the rest of the system sees of a
Bandcamp page: the extractor produces it, the fetcher turns it into
canonical tracks. Nothing downstream depends on the page's text shape.
"""

from dataclasses import dataclass

from streamgrab.core.models import Track


def normalize_stream_url(stream_path: str) -> str:
    """
    Make a stream path an absolute https URL.

    Bandcamp embeds protocol-relative URLs; JSON-escaped slashes are
    unescaped as well.

    Examples:
        normalize_stream_url("//example.cdn/track.mp3")
        # "https://example.cdn/track.mp3"
    """
    stream = stream_path.replace("\\/", "/")
    if stream.startswith("//"):
        return f"https:{stream}"
    return stream


@dataclass(frozen=True)
class AlbumTrackEntry:
    """
    One track as extracted from an album page.

    Attributes:
        stream_path: Stream URL as it appears in the page, possibly
                     protocol-relative ("//t4.bcbits.com/stream/...").
        title_slug: Track slug from the track's link path
                    (e.g. "night-drive" from "/track/night-drive").
        duration: Length in whole seconds (0 if unparseable).
    """
    stream_path: str
    title_slug: str
    duration: int


@dataclass(frozen=True)
class RawAlbumMetadata:
    """
    Everything extracted from one album page.

    Invariant:
        entries was built from three extraction arrays (streams, title
        slugs, durations) of identical length. The extractor rejects the
        album otherwise.

    Attributes:
        artist: Album artist ("Unknown Artist" if the page names none).
        title: Album title.
        entries: Tracks in page order.
    """
    artist: str
    title: str
    entries: tuple[AlbumTrackEntry, ...]

    @property
    def label(self) -> str:
        return f"(Album) {self.title} by {self.artist}"

    def to_tracks(self) -> tuple[Track, ...]:
        """
        Normalize entries into canonical tracks.

        The album artist is repeated on every track; stream paths are
        made absolute https URLs.
        """
        return tuple(
            Track(
                stream=normalize_stream_url(entry.stream_path),
                duration=entry.duration,
                title=entry.title_slug,
                artist=self.artist,
            )
            for entry in self.entries
        )
