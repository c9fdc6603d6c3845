"""
Exception classes for streamgrab.

Every error streamgrab raises on purpose lives here. Each one carries a human-readable message and a details dictionary
so the CLI can print a clear message and the log files keep the context.

Exception Hierarchy:
    StreamGrabError (base)
        ConfigError - Bad or unreadable config.yaml
        MissingURLError - No URL was provided
        ResolutionError - A URL could not be resolved to a resource
        UnknownResourceError - The URL names a resource kind we don't handle
        TransportError - Network / HTTP failure while fetching
        NoAlbumFoundError - Bandcamp page has no embedded album data
        MalformedAlbumError - Bandcamp album data is inconsistent
        PlaylistWriteError - The playlist file could not be written

An empty playlist is NOT an error: the writer skips it and reports a
skipped outcome instead.
"""


class StreamGrabError(Exception):
    """
    Base exception for all streamgrab errors.

    The CLI catches this type to turn failures into exit codes, and
    catalog fan-outs catch it to skip a single album.

    Attributes:
        message: Human-readable error description.
        details: Context for the log files, e.g. url, resource_id, status_code
                 or original_error. Empty dict when not given.

    Example:
        try:
            outcomes = run(url, config)
        except StreamGrabError as e:
            logger.error(e.message)
            logger.debug(e.details)
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(StreamGrabError):
    """
    config.yaml (or the --config file) can't be used. Exit code 2.

    Common causes:
        - The --config path does not exist
        - The YAML does not parse
        - Invalid field values (e.g., empty client_id, zero threads)
    """
    pass


class MissingURLError(StreamGrabError):
    """
    Raised when no URL was given.

    Raised before any network call is made.
    """
    pass


class ResolutionError(StreamGrabError):
    """
    Raised when a URL cannot be resolved to a canonical resource.

    Common causes:
        - The SoundCloud resolve endpoint failed (network, 404, private)
        - The canonical path returned is missing its numeric id segment
    """
    pass


class UnknownResourceError(StreamGrabError):
    """
    Raised when a URL resolves to a resource kind we cannot aggregate.

    Common causes:
        - SoundCloud resolved to something other than tracks/playlists/users
        - The URL belongs to neither SoundCloud nor Bandcamp
        - A bandcamp.com URL that is neither an album/track nor a profile page
    """
    pass


class TransportError(StreamGrabError):
    """
    Raised when fetching a page or an API resource fails.

    Fatal to the resource being fetched. During catalog or set fan-out it
    is isolated to the single sub-resource.

    Attributes:
        status_code: HTTP status code when the server answered, else None.
        is_not_found: True if the server answered 404.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        """
        Initialize transport error with the HTTP status, if any.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            status_code: HTTP status returned by the server, or None for
                         connection-level failures (DNS, timeout, reset).
        """
        super().__init__(message, details)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class NoAlbumFoundError(StreamGrabError):
    """
    Raised when a Bandcamp page does not embed any album data.

    Fatal to that album only.
    """
    pass


class MalformedAlbumError(StreamGrabError):
    """
    Raised when the embedded album data is inconsistent.

    The stream, title and duration arrays must all have the same length.
    On mismatch the whole album is discarded: partial playlists are
    never written.

    Example:
        raise MalformedAlbumError(
            "Track field count mismatch",
            details={'streams': 10, 'titles': 9, 'durations': 10}
        )
    """
    pass


class PlaylistWriteError(StreamGrabError):
    """
    Raised when a playlist file cannot be created or written.

    Common causes:
        - Permission denied on the output directory
        - Disk full
    """
    pass
