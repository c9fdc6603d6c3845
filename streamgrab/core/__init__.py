"""
Core module for streamgrab.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - models: Track, ResourceReference, Playlist and PlaylistOutcome

The resolver and playlist writer live in this package too but are imported
from their own modules (streamgrab.core.resolver, streamgrab.core.playlist_writer).

Usage:
    from streamgrab.core import (
        Config, load_config,
        setup_logging, get_logger,
        StreamGrabError, ConfigError
    )
"""

from streamgrab.core.config import (
    Config,
    FetchConfig,
    OutputConfig,
    SoundcloudConfig,
    UserConfig,
    default_config,
    load_config,
)
from streamgrab.core.exceptions import (
    ConfigError,
    MalformedAlbumError,
    MissingURLError,
    NoAlbumFoundError,
    PlaylistWriteError,
    ResolutionError,
    StreamGrabError,
    TransportError,
    UnknownResourceError,
)
from streamgrab.core.logger import (
    get_logger,
    log_resource_failure,
    setup_logging,
    shutdown_logging,
)
from streamgrab.core.models import (
    Playlist,
    PlaylistOutcome,
    ResourceKind,
    ResourceReference,
    Site,
    Track,
)

__all__ = [
    # Config
    "Config",
    "SoundcloudConfig",
    "OutputConfig",
    "UserConfig",
    "FetchConfig",
    "default_config",
    "load_config",
    # Exceptions
    "StreamGrabError",
    "ConfigError",
    "MissingURLError",
    "ResolutionError",
    "UnknownResourceError",
    "TransportError",
    "NoAlbumFoundError",
    "MalformedAlbumError",
    "PlaylistWriteError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_resource_failure",
    "shutdown_logging",
    # Models
    "Site",
    "ResourceKind",
    "ResourceReference",
    "Track",
    "Playlist",
    "PlaylistOutcome",
]
