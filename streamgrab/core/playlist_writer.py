"""
Playlist file writing for streamgrab.

This module serializes Playlist objects into extended M3U files:

    #EXTM3U
    #EXTINF:180,Song - Band
    https://api.soundcloud.com/tracks/42/stream?client_id=...
    #EXTINF:241,Other Song - Band
    https://...

File Naming:
    The filename is the sanitized playlist label plus ".m3u", appended
    exactly once. Example: "(Track) Song - Band.m3u"

Empty Playlists:
    A playlist with no tracks never produces a file. The writer returns a
    skipped PlaylistOutcome and logs it.

Usage:
    from streamgrab.core.playlist_writer import PlaylistWriter

    writer = PlaylistWriter(config.output.directory)
    outcome = writer.write(playlist, source=url)
"""

from pathlib import Path

from streamgrab.core.exceptions import PlaylistWriteError
from streamgrab.core.logger import format_saved_message, get_logger
from streamgrab.core.models import Playlist, PlaylistOutcome, Track
from streamgrab.utils import ensure_directory, sanitize_filename

logger = get_logger(__name__)


M3U_HEADER = "#EXTM3U"
EXTINF_PREFIX = "#EXTINF:"
M3U_EXTENSION = ".m3u"


def playlist_filename(label: str) -> str:
    """
    Derive the playlist filename from its label.

    A label that already ends in ".m3u" is not suffixed a second time.

    Examples:
        playlist_filename("(Uploads) someone")      # "(Uploads) someone.m3u"
        playlist_filename("(Uploads) someone.m3u")  # "(Uploads) someone.m3u"
    """
    if label.lower().endswith(M3U_EXTENSION):
        label = label[:-len(M3U_EXTENSION)]
    return sanitize_filename(label) + M3U_EXTENSION


def _one_line(text: str) -> str:
    # parse_m3u splits on every line boundary str.splitlines() knows
    return " ".join(text.splitlines())


def render_m3u(tracks: list[Track] | tuple[Track, ...]) -> str:
    """
    Render tracks as extended M3U text, preserving their order.

    Args:
        tracks: Tracks to render. Line breaks inside a title or artist
                are replaced by spaces so each track stays two lines.

    Returns:
        The complete file content, newline terminated.
    """
    lines = [M3U_HEADER]
    for track in tracks:
        lines.append(f"{EXTINF_PREFIX}{track.duration},{_one_line(track.display_name)}")
        lines.append(_one_line(track.stream))
    return "\n".join(lines) + "\n"


def parse_m3u(text: str) -> list[Track]:
    """
    Parse extended M3U text back into tracks.

    Only files in the shape render_m3u() produces are understood:
    each #EXTINF line is followed by its stream URL. The display name is
    split on the LAST " - " (titles may contain the separator, artists
    are assumed not to). Lines without a preceding #EXTINF get duration
    0 and empty title/artist.

    Args:
        text: M3U file content.

    Returns:
        Tracks in file order.
    """
    tracks: list[Track] = []
    pending: tuple[int, str, str] | None = None

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.startswith(EXTINF_PREFIX):
            info = line[len(EXTINF_PREFIX):]
            duration_text, _, display = info.partition(",")
            try:
                duration = int(duration_text)
            except ValueError:
                duration = 0
            title, sep, artist = display.rpartition(" - ")
            if not sep:
                title, artist = display, ""
            pending = (duration, title, artist)
            continue

        if line.startswith("#"):
            continue

        duration, title, artist = pending or (0, "", "")
        tracks.append(Track(stream=line, duration=duration, title=title, artist=artist))
        pending = None

    return tracks


class PlaylistWriter:
    """
    Writes playlists into one output directory.

    Attributes:
        output_dir: Directory playlist files are written to.
                    Created on the first non-empty write.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def path_for(self, label: str) -> Path:
        return self.output_dir / playlist_filename(label)

    def write(self, playlist: Playlist, source: str = "") -> PlaylistOutcome:
        """
        Write a playlist to disk.

        Args:
            playlist: Label and ordered tracks.
            source: URL or id the playlist came from (for reporting).

        Returns:
            PlaylistOutcome: written (path set) or skipped (empty playlist).

        Raises:
            PlaylistWriteError: If the directory or file cannot be written.
                                An existing file with the same name is
                                overwritten.
        """
        source = source or playlist.label

        if playlist.is_empty:
            logger.info(f"Empty playlist, skipping: {playlist.label}")
            return PlaylistOutcome(label=playlist.label, source=source)

        path = self.path_for(playlist.label)

        try:
            ensure_directory(self.output_dir)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(render_m3u(playlist.tracks))
        except OSError as e:
            raise PlaylistWriteError(
                f"Failed to write playlist '{playlist.label}': {e}",
                details={"file_path": str(path), "original_error": str(e)}
            ) from e

        logger.info(format_saved_message(playlist.label, path, len(playlist.tracks)))
        return PlaylistOutcome(
            label=playlist.label,
            source=source,
            path=path,
            track_count=len(playlist.tracks),
        )
