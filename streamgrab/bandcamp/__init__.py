"""
Bandcamp integration module for streamgrab.

This module provides all functionality for the HTML-backed site:
    - BandcampClient: Page fetcher
    - extract_album / find_album_paths: Page metadata extraction
    - BandcampFetcher: Aggregates albums and catalogs into playlists
"""

from streamgrab.bandcamp.client import BandcampClient
from streamgrab.bandcamp.extractor import (
    extract_album,
    find_album_block,
    find_album_paths,
    normalize_stream_url,
)
from streamgrab.bandcamp.fetcher import BandcampFetcher
from streamgrab.bandcamp.models import AlbumTrackEntry, RawAlbumMetadata

__all__ = [
    "AlbumTrackEntry",
    "BandcampClient",
    "BandcampFetcher",
    "RawAlbumMetadata",
    "extract_album",
    "find_album_block",
    "find_album_paths",
    "normalize_stream_url",
]
