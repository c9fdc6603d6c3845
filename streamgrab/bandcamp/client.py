"""
HTML page fetcher for Bandcamp.

Bandcamp has no public API; album and profile pages are fetched as
plain HTML and handed to the extractor.
"""

from typing import Any

import requests

from streamgrab.core.config import Config, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from streamgrab.core.exceptions import TransportError
from streamgrab.core.logger import get_logger

logger = get_logger(__name__)


class BandcampClient:
    """
    Fetches Bandcamp pages over one pooled requests.Session.

    requests.Session is safe to share between the worker threads used
    for catalog pages as long as the session itself isn't reconfigured.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None
    ) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, config: Config) -> "BandcampClient":
        return cls(timeout=config.fetch.timeout, user_agent=config.fetch.user_agent)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "BandcampClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_page(self, url: str) -> str:
        """
        Fetch a page and return its decoded body.

        Raises:
            TransportError: On network failure or an error status.
        """
        logger.debug(f"GET {url}")

        try:
            with self._session.get(url, timeout=self.timeout) as response:
                response.raise_for_status()
                return response.text
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"Bandcamp request failed (HTTP {status}): {url}",
                details={"url": url, "http_status": status},
                status_code=status
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"Bandcamp request failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
