"""
streamgrab: Turn SoundCloud and Bandcamp URLs into M3U playlists.

No audio is downloaded. streamgrab finds the stream URL of every track a
link refers to and writes them as extended M3U playlist files that any
media player can open.

Architecture:
    A URL flows through four stages:

    1. Classify (core/resolver.py): which site, and what kind of resource
        - SoundCloud URLs are resolved through the API to /tracks/<id>,
          /playlists/<id> or /users/<id>
        - Bandcamp URLs are album/track pages or artist/label catalogs

    2. Fetch (soundcloud/, bandcamp/): gather the track records
        - SoundCloud: JSON API, paginated collections
        - Bandcamp: HTML pages, album data extracted from the page

    3. Normalize: every record becomes the same frozen Track
       (stream URL, duration in seconds, title, artist)

    4. Write (core/playlist_writer.py): one .m3u file per playlist

Modules:
    core/        - Configuration, logging, exceptions, models, resolver, writer
    soundcloud/  - SoundCloud API client and aggregation
    bandcamp/    - Bandcamp page fetcher, extractor and aggregation
    utils/       - Filename sanitizing, directories, worker pool
    pipeline.py  - run(): classify, fetch and write for one URL
    cli.py       - Command-line interface

Usage:
    Command Line:
        streamgrab -u "https://soundcloud.com/someone/some-track"
        streamgrab -u "https://soundcloud.com/someone" -f -s -d ~/Music/Playlists
        streamgrab -u "https://someband.bandcamp.com"

    Python API:
        from streamgrab import load_config, run

        config = load_config()
        for outcome in run("https://someband.bandcamp.com/album/x", config):
            print(outcome.label, outcome.path)

Dependencies:
    - requests: HTTP for the SoundCloud API and Bandcamp pages
    - yt-dlp: Filename sanitizing
    - click: CLI framework
    - rich-click: CLI colors
    - tqdm: Progress bars
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "streamgrab"
__license__ = "MIT"

# Convenience imports for common usage
from streamgrab.core import (
    Config,
    ConfigError,
    PlaylistOutcome,
    StreamGrabError,
    Track,
    get_logger,
    load_config,
    setup_logging,
)
from streamgrab.pipeline import run

__all__ = [
    "__version__",
    "Config",
    "ConfigError",
    "PlaylistOutcome",
    "StreamGrabError",
    "Track",
    "get_logger",
    "load_config",
    "run",
    "setup_logging",
]
