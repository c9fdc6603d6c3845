"""
SoundCloud API client for streamgrab.

This module wraps the SoundCloud HTTP API with a requests.Session and
translates every failure into the project's exception types, so callers
only ever see ResolutionError or TransportError.

Authentication:
    Every request carries the application's client_id as a query
    parameter. The same client_id is later appended to stream URLs in the
    generated playlists.

Pagination:
    Collection endpoints (user uploads, favourites, sets) are requested
    with linked_partitioning=1 and followed through next_href until the
    last page.

Usage:
    from streamgrab.soundcloud.client import SoundcloudClient

    with SoundcloudClient.from_config(config) as client:
        path = client.resolve("https://soundcloud.com/band/song")  # "/tracks/42"
        track = client.track(42)
"""

from typing import Any
from urllib.parse import urlsplit

import requests

from streamgrab.core.config import Config, DEFAULT_API_BASE, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from streamgrab.core.exceptions import ResolutionError, TransportError
from streamgrab.core.logger import get_logger

logger = get_logger(__name__)


# Items requested per page for collection endpoints
PAGE_SIZE = 200


class SoundcloudClient:
    """
    Thin SoundCloud API client.

    Attributes:
        client_id: Application client id sent with every request.
        api_base: API root, e.g. "https://api.soundcloud.com".
        timeout: Seconds before a request is abandoned.

    Thread Safety:
        Only used from the main thread; SoundCloud fan-out is sequential.
    """

    def __init__(
        self,
        client_id: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None
    ) -> None:
        self.client_id = client_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, config: Config) -> "SoundcloudClient":
        return cls(
            client_id=config.soundcloud.client_id,
            api_base=config.soundcloud.api_base,
            timeout=config.fetch.timeout,
            user_agent=config.fetch.user_agent,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SoundcloudClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, url: str) -> str:
        """
        Map a public SoundCloud URL to its canonical API path.

        Args:
            url: Any public SoundCloud URL (track, set, profile).

        Returns:
            Canonical path such as "/tracks/42" or "/users/1234".

        Raises:
            ResolutionError: On network failure, an error status (404 for
                             unknown or private URLs), or a response that
                             names no resource.

        Behavior:
            The resolve endpoint answers with a redirect to the canonical
            resource; its Location path is returned. Servers that answer
            with the resource body directly are handled too, by building
            the path from the body's kind and id.
        """
        params = {"url": url, "client_id": self.client_id}

        try:
            with self._session.get(
                f"{self.api_base}/resolve",
                params=params,
                timeout=self.timeout,
                allow_redirects=False
            ) as response:
                if response.is_redirect:
                    return urlsplit(response.headers["Location"]).path
                response.raise_for_status()
                data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ResolutionError(
                f"Could not resolve URL (HTTP {status}): {url}",
                details={"url": url, "http_status": status}
            ) from e
        except requests.RequestException as e:
            raise ResolutionError(
                f"Could not resolve URL: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
        except ValueError as e:
            raise ResolutionError(
                f"Invalid response while resolving URL: {url}",
                details={"url": url, "original_error": str(e)}
            ) from e

        kind = data.get("kind") if isinstance(data, dict) else None
        resource_id = data.get("id") if isinstance(data, dict) else None
        if not kind or resource_id is None:
            raise ResolutionError(
                "Invalid URL provided (no resource found)",
                details={"url": url}
            )
        return f"/{kind}s/{resource_id}"

    # =========================================================================
    # Single resources
    # =========================================================================

    def track(self, track_id: int) -> dict[str, Any]:
        """Get a track object."""
        return self._get_object(f"/tracks/{track_id}")

    def playlist(self, playlist_id: int) -> dict[str, Any]:
        """Get a set (playlist) object, including its track list and owner."""
        return self._get_object(f"/playlists/{playlist_id}")

    def user(self, user_id: int) -> dict[str, Any]:
        """Get a user profile object (username, permalink, ...)."""
        return self._get_object(f"/users/{user_id}")

    # =========================================================================
    # User collections (paginated)
    # =========================================================================

    def user_tracks(self, user_id: int) -> list[dict[str, Any]]:
        """Get ALL tracks uploaded by a user, handling pagination."""
        return self._get_all(f"/users/{user_id}/tracks")

    def user_favorites(self, user_id: int) -> list[dict[str, Any]]:
        """Get ALL tracks a user has favourited, handling pagination."""
        return self._get_all(f"/users/{user_id}/favorites")

    def user_playlists(self, user_id: int) -> list[dict[str, Any]]:
        """Get ALL sets owned by a user, handling pagination."""
        return self._get_all(f"/users/{user_id}/playlists")

    # =========================================================================
    # HTTP helpers
    # =========================================================================

    def _get(self, path_or_url: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET an API path (or an absolute next_href) and decode the JSON body.

        Raises:
            TransportError: On network failure, error status or invalid JSON.
                            status_code is set when the server answered.
        """
        if path_or_url.startswith(("http://", "https://")):
            url = path_or_url
        else:
            url = f"{self.api_base}{path_or_url}"

        params = dict(params or {})
        # next_href links already carry the client_id
        if "client_id=" not in url:
            params.setdefault("client_id", self.client_id)

        logger.debug(f"GET {url}")

        try:
            with self._session.get(url, params=params, timeout=self.timeout) as response:
                response.raise_for_status()
                return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"SoundCloud request failed (HTTP {status}): {path_or_url}",
                details={"url": url, "http_status": status},
                status_code=status
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"SoundCloud request failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON from SoundCloud: {path_or_url}",
                details={"url": url, "original_error": str(e)}
            ) from e

    def _get_object(self, path: str) -> dict[str, Any]:
        data = self._get(path)
        if not isinstance(data, dict):
            raise TransportError(
                f"Unexpected response for {path}",
                details={"path": path}
            )
        return data

    def _get_all(self, path: str) -> list[dict[str, Any]]:
        """
        Fetch every item of a collection endpoint.

        Handles both the linked-partitioning shape
        ({"collection": [...], "next_href": ...}) and the legacy bare list.
        """
        all_items: list[dict[str, Any]] = []
        data = self._get(path, {"limit": PAGE_SIZE, "linked_partitioning": 1})

        while True:
            if isinstance(data, list):
                all_items.extend(data)
                break

            if not isinstance(data, dict):
                raise TransportError(
                    f"Unexpected response for {path}",
                    details={"path": path}
                )

            all_items.extend(data.get("collection") or [])

            next_href = data.get("next_href")
            if not next_href:
                break
            data = self._get(next_href)

        return all_items
