"""
URL classification for streamgrab.

Decides which site a URL belongs to and what kind of resource it names,
producing a ResourceReference for the aggregators.

Classification Rules:
    Bandcamp (no network access needed):
        - path contains /album/ or /track/  -> ALBUM
        - any other page on <name>.bandcamp.com -> CATALOG (artist/label page)

    SoundCloud (one API call):
        The API's resolve endpoint maps any public URL to a canonical path
        of the form /<resourceType>/<id>[.<ext>], e.g. /tracks/42 or
        /users/1234.json. The first segment gives the kind, the second the
        numeric id.

        tracks    -> TRACK
        playlists -> PLAYLIST
        users     -> USER

Usage:
    from streamgrab.core.resolver import classify

    reference = classify("https://soundcloud.com/band/song", soundcloud_client)
    # ResourceReference(site=Site.SOUNDCLOUD, kind=ResourceKind.TRACK, id=42, ...)
"""

from typing import Protocol
from urllib.parse import urlsplit

from streamgrab.core.exceptions import (
    MissingURLError,
    ResolutionError,
    UnknownResourceError,
)
from streamgrab.core.logger import get_logger
from streamgrab.core.models import ResourceKind, ResourceReference, Site

logger = get_logger(__name__)


SOUNDCLOUD_DOMAIN = "soundcloud.com"
BANDCAMP_DOMAIN = "bandcamp.com"

# Canonical resource type -> kind
_SOUNDCLOUD_KINDS = {
    "tracks": ResourceKind.TRACK,
    "playlists": ResourceKind.PLAYLIST,
    "users": ResourceKind.USER,
}

_BANDCAMP_ALBUM_MARKERS = ("/album/", "/track/")


class Resolver(Protocol):
    """Anything that can map a public URL to a canonical API path."""

    def resolve(self, url: str) -> str:
        ...


def _hostname(url: str) -> str:
    # urlsplit only finds the host after "//"; accept scheme-less input too
    parts = urlsplit(url if "//" in url else f"//{url}")
    return (parts.hostname or "").lower()


def _matches_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith(f".{domain}")


def detect_site(url: str) -> Site:
    """
    Return the site a URL belongs to.

    Raises:
        UnknownResourceError: If the URL is neither SoundCloud nor Bandcamp.
    """
    host = _hostname(url)

    if _matches_domain(host, SOUNDCLOUD_DOMAIN):
        return Site.SOUNDCLOUD
    if _matches_domain(host, BANDCAMP_DOMAIN):
        return Site.BANDCAMP

    raise UnknownResourceError(
        f"Unsupported URL (not SoundCloud or Bandcamp): {url}",
        details={"url": url}
    )


def parse_canonical_path(path: str) -> tuple[ResourceKind, int]:
    """
    Split a SoundCloud canonical path into kind and numeric id.

    Args:
        path: Canonical path or full API URL, e.g. "/tracks/42",
              "/users/7.json" or "https://api.soundcloud.com/playlists/9".

    Returns:
        Tuple of (kind, id).

    Raises:
        ResolutionError: If the path is empty or the id segment is missing
                         or not numeric.
        UnknownResourceError: If the resource type is not tracks, playlists
                              or users.

    Examples:
        parse_canonical_path("/tracks/42")       # (ResourceKind.TRACK, 42)
        parse_canonical_path("/users/7.json")    # (ResourceKind.USER, 7)
    """
    segments = [s for s in urlsplit(path).path.split("/") if s]

    if not segments:
        raise ResolutionError(
            "Invalid URL provided (no resource found)",
            details={"canonical_path": path}
        )

    resource_type = segments[0].split(".")[0]
    kind = _SOUNDCLOUD_KINDS.get(resource_type)
    if kind is None:
        raise UnknownResourceError(
            f"Unknown SoundCloud resource: {resource_type}",
            details={"canonical_path": path, "resource_type": resource_type}
        )

    if len(segments) < 2:
        raise ResolutionError(
            f"Resolved path has no resource id: {path}",
            details={"canonical_path": path}
        )

    raw_id = segments[1].split(".")[0]
    if not (raw_id.isascii() and raw_id.isdecimal()):
        raise ResolutionError(
            f"Resolved path has a non-numeric id: {path}",
            details={"canonical_path": path, "resource_id": raw_id}
        )

    return kind, int(raw_id)


def classify_bandcamp(url: str) -> ResourceReference:
    """
    Classify a Bandcamp URL without any network access.

    Raises:
        UnknownResourceError: If the URL is on bandcamp.com itself rather
                              than an artist/label subdomain and names no
                              album or track.
    """
    path = urlsplit(url).path

    if any(marker in path for marker in _BANDCAMP_ALBUM_MARKERS):
        return ResourceReference(Site.BANDCAMP, ResourceKind.ALBUM, url)

    host = _hostname(url)
    if host.endswith(f".{BANDCAMP_DOMAIN}"):
        return ResourceReference(Site.BANDCAMP, ResourceKind.CATALOG, url)

    raise UnknownResourceError(
        f"Not a Bandcamp album, track or profile URL: {url}",
        details={"url": url}
    )


def classify_soundcloud(url: str, soundcloud: Resolver) -> ResourceReference:
    """
    Classify a SoundCloud URL through the API resolve endpoint.

    Raises:
        ResolutionError: If resolution fails or returns a malformed path.
        UnknownResourceError: If the resource type is not supported.
    """
    canonical_path = soundcloud.resolve(url)
    kind, resource_id = parse_canonical_path(canonical_path)
    logger.debug(f"Resolved {url} -> {kind.value} {resource_id}")
    return ResourceReference(Site.SOUNDCLOUD, kind, url, resource_id)


def classify(url: str | None, soundcloud: Resolver | None = None) -> ResourceReference:
    """
    Classify an arbitrary user-supplied URL.

    Args:
        url: The URL to classify.
        soundcloud: Resolver used for SoundCloud URLs. Not needed (and
                    not called) for Bandcamp URLs.

    Returns:
        ResourceReference describing the site, kind and id.

    Raises:
        MissingURLError: If url is empty. No network call is made.
        ResolutionError: If a SoundCloud URL cannot be resolved, or no
                         resolver was given for one.
        UnknownResourceError: If the site or resource kind is not supported.
    """
    if url is None or not url.strip():
        raise MissingURLError("No URL provided")

    url = url.strip()
    site = detect_site(url)

    if site is Site.BANDCAMP:
        return classify_bandcamp(url)

    if soundcloud is None:
        raise ResolutionError(
            "No SoundCloud client available to resolve URL",
            details={"url": url}
        )
    return classify_soundcloud(url, soundcloud)
