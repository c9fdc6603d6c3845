"""
End-to-end pipeline for one URL.

    url -> classify -> site fetcher -> PlaylistWriter -> [PlaylistOutcome]

run() is the only entry point the CLI uses. It never exits the process;
every failure is a StreamGrabError for the caller to report.
"""

from streamgrab.bandcamp.client import BandcampClient
from streamgrab.bandcamp.fetcher import BandcampFetcher
from streamgrab.core.config import Config
from streamgrab.core.exceptions import MissingURLError
from streamgrab.core.logger import get_logger
from streamgrab.core.models import PlaylistOutcome, Site
from streamgrab.core.playlist_writer import PlaylistWriter
from streamgrab.core.resolver import classify
from streamgrab.soundcloud.client import SoundcloudClient
from streamgrab.soundcloud.fetcher import SoundcloudFetcher

logger = get_logger(__name__)


def run(
    url: str | None,
    config: Config,
    soundcloud: SoundcloudClient | None = None,
    bandcamp: BandcampClient | None = None
) -> list[PlaylistOutcome]:
    """
    Classify a URL, gather its tracks and write the playlists.

    Args:
        url: SoundCloud or Bandcamp URL.
        config: Loaded configuration (output directory, credentials,
                user options, HTTP settings).
        soundcloud: Client to use instead of one built from config.
        bandcamp: Client to use instead of one built from config.

    Returns:
        One outcome per playlist, in the order they were produced.

    Raises:
        MissingURLError: If url is empty. Nothing is fetched.
        StreamGrabError: Any failure classifying or fetching the
                         requested resource itself.

    Clients built here are closed before returning; clients passed in
    are left open for the caller.
    """
    if url is None or not url.strip():
        raise MissingURLError("No URL provided")

    owns_soundcloud = soundcloud is None
    owns_bandcamp = bandcamp is None
    soundcloud = soundcloud or SoundcloudClient.from_config(config)
    bandcamp = bandcamp or BandcampClient.from_config(config)

    writer = PlaylistWriter(config.output.directory)

    try:
        reference = classify(url, soundcloud)
        logger.info(f"Processing {reference.site.value} {reference.kind.value}: {reference.locator}")

        if reference.site is Site.SOUNDCLOUD:
            return SoundcloudFetcher(soundcloud, writer, config.user).fetch(reference)

        return BandcampFetcher(bandcamp, writer, threads=config.fetch.threads).fetch(reference)
    finally:
        if owns_soundcloud:
            soundcloud.close()
        if owns_bandcamp:
            bandcamp.close()
