"""
SoundCloud integration module for streamgrab.

This module provides all functionality for the API-backed site:
    - SoundcloudClient: HTTP API client (resolve, tracks, sets, users)
    - SoundcloudFetcher: Aggregates tracks/sets/users into playlists

Usage:
    from streamgrab.soundcloud import SoundcloudClient, SoundcloudFetcher

    client = SoundcloudClient.from_config(config)
    fetcher = SoundcloudFetcher(client, writer, config.user)
    outcomes = fetcher.fetch(reference)
"""

from streamgrab.soundcloud.client import SoundcloudClient
from streamgrab.soundcloud.fetcher import SoundcloudFetcher, tracks_from_api

__all__ = [
    "SoundcloudClient",
    "SoundcloudFetcher",
    "tracks_from_api",
]
