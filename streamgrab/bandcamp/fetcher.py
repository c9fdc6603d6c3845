"""
Bandcamp album aggregation for streamgrab.

    ALBUM    -> one "(Album) <title> by <artist>" playlist
    CATALOG  -> one album playlist per album/track linked from the
                artist or label page, in the order the page lists them

Error Handling:
    A single album request propagates its failure. During a catalog scan
    each album is isolated: a missing or malformed album is logged,
    reported as a failed outcome and the scan continues.
"""

from urllib.parse import urljoin

from streamgrab.bandcamp.client import BandcampClient
from streamgrab.bandcamp.extractor import extract_album, find_album_paths
from streamgrab.core.exceptions import StreamGrabError, UnknownResourceError
from streamgrab.core.logger import get_logger, log_resource_failure
from streamgrab.core.models import (
    Playlist,
    PlaylistOutcome,
    ResourceKind,
    ResourceReference,
)
from streamgrab.core.playlist_writer import PlaylistWriter
from streamgrab.core.resolver import classify_bandcamp
from streamgrab.utils import run_in_parallel

logger = get_logger(__name__)


class BandcampFetcher:
    """
    Aggregates Bandcamp pages into written playlists.

    Attributes:
        threads: Albums fetched concurrently during a catalog scan.
                 1 keeps the scan strictly sequential.
    """

    def __init__(
        self,
        client: BandcampClient,
        writer: PlaylistWriter,
        threads: int = 1
    ) -> None:
        self._client = client
        self._writer = writer
        self.threads = max(threads, 1)

    def fetch(self, reference: ResourceReference) -> list[PlaylistOutcome]:
        """
        Aggregate a classified Bandcamp reference.

        Raises:
            UnknownResourceError: If the kind is not ALBUM or CATALOG.
            StreamGrabError: Any failure for a single album, or fetching
                             the catalog page itself.
        """
        if reference.kind is ResourceKind.ALBUM:
            logger.debug("Album URL received")
            return [self.from_album(reference.locator)]
        if reference.kind is ResourceKind.CATALOG:
            logger.debug("Artist/label URL received")
            return self.from_catalog(reference.locator)

        raise UnknownResourceError(
            f"Unknown Bandcamp resource: {reference.kind.value}",
            details={"url": reference.locator}
        )

    def from_album(self, url: str) -> PlaylistOutcome:
        """Write the playlist for one album (or single track) page."""
        album = extract_album(self._client.get_page(url))
        logger.debug(f"Album '{album.title}' has {len(album.entries)} tracks")

        playlist = Playlist(label=album.label, tracks=album.to_tracks())
        return self._writer.write(playlist, source=url)

    def from_catalog(self, url: str) -> list[PlaylistOutcome]:
        """
        Write one playlist per album linked from an artist/label page.

        Returns:
            Outcomes in page order, failed albums included.

        Raises:
            TransportError: If the catalog page itself cannot be fetched.
        """
        body = self._client.get_page(url)
        # the same album may be linked both relatively and absolutely
        album_urls = list(dict.fromkeys(urljoin(url, path) for path in find_album_paths(body)))
        logger.info(f"Found {len(album_urls)} albums on {url}")

        if self.threads == 1 or len(album_urls) < 2:
            results = []
            for i, album_url in enumerate(album_urls, 1):
                logger.debug(f"[{i}/{len(album_urls)}] {album_url}")
                try:
                    results.append((album_url, self._catalog_album(album_url)))
                except StreamGrabError as e:
                    results.append((album_url, e))
        else:
            results = run_in_parallel(
                self._catalog_album,
                album_urls,
                num_threads=self.threads,
                description="Fetching albums"
            )

        outcomes: list[PlaylistOutcome] = []
        for album_url, result in results:
            if isinstance(result, StreamGrabError):
                log_resource_failure(logger, album_url, result)
                outcomes.append(PlaylistOutcome.from_error(album_url, result))
            elif isinstance(result, Exception):
                raise result
            else:
                outcomes.append(result)

        return outcomes

    def _catalog_album(self, album_url: str) -> PlaylistOutcome:
        reference = classify_bandcamp(album_url)
        if reference.kind is not ResourceKind.ALBUM:
            raise UnknownResourceError(
                f"Catalog link is not an album: {album_url}",
                details={"url": album_url}
            )
        return self.from_album(reference.locator)
