"""Test configuration and fixtures"""

import html
import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from streamgrab.core.config import (
    Config,
    FetchConfig,
    OutputConfig,
    SoundcloudConfig,
    UserConfig,
)
from streamgrab.core.exceptions import TransportError


CLIENT_ID = "test_client_id"
API_BASE = "https://api.soundcloud.com"


SAMPLE_ALBUM_PAGE = """<!DOCTYPE html>
<html>
<head>
<script type="text/javascript">
var TralbumData = {
    // don't rely on key order here
    current: {"title":"Night Drive","type":"album"},
    artist: "Neon Band",
    trackinfo: [{"file":{"mp3-128":"//t4.bcbits.com/stream/aaa/mp3-128/1"},"title":"Intro","title_link":"/track/intro","duration":61.5},{"file":{"mp3-128":"//t4.bcbits.com/stream/bbb/mp3-128/2"},"title":"Highway; Night","title_link":"/track/highway-night","duration":241.3}],
    url: "https://neonband.bandcamp.com" + "/album/night-drive"
};
var EmbedData = {
    album_title: "Night Drive"
};
</script>
</head>
<body><h2 class="trackTitle">Night Drive</h2></body>
</html>
"""

# One duration missing: streams=2, titles=2, durations=1
MALFORMED_ALBUM_PAGE = """<html><head><script>
var TralbumData = {
    current: {"title":"Broken Tape"},
    artist: "Neon Band",
    trackinfo: [{"file":{"mp3-128":"//t4.bcbits.com/stream/ccc"},"title_link":"/track/one","duration":100.0},{"file":{"mp3-128":"//t4.bcbits.com/stream/ddd"},"title_link":"/track/two"}]
};
</script></head><body></body></html>
"""

SAMPLE_CATALOG_PAGE = """<html><body>
<ol id="music-grid">
<li class="music-grid-item"><a href="/album/night-drive"><p class="title">Night Drive</p></a></li>
<li class="music-grid-item"><a href="/album/broken-tape"><p class="title">Broken Tape</p></a></li>
</ol>
<a href="/music">music</a>
</body></html>
"""


def data_tralbum_page(data: dict) -> str:
    """Build a page embedding album data in the data-tralbum attribute."""
    escaped = html.escape(json.dumps(data), quote=True)
    return f'<html><body><div id="pagedata" data-tralbum="{escaped}"></div></body></html>'


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the root logger as it was after each test"""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def config(temp_dir):
    """Configuration writing into the temporary directory"""
    return Config(
        soundcloud=SoundcloudConfig(client_id=CLIENT_ID, api_base=API_BASE),
        output=OutputConfig(directory=temp_dir, write_logs=False),
        user=UserConfig(),
        fetch=FetchConfig(),
    )


@pytest.fixture
def sample_track_data():
    """Sample SoundCloud track object"""
    return {
        "kind": "track",
        "id": 42,
        "title": "Song",
        "duration": 180000,  # 3:00
        "user": {"id": 7, "username": "Band"},
    }


@pytest.fixture
def sample_playlist_data(sample_track_data):
    """Sample SoundCloud set with two tracks"""
    second = {
        "kind": "track",
        "id": 43,
        "title": "Other Song",
        "duration": 241999,
        "stream_url": "https://api.soundcloud.com/tracks/43/stream",
        "user": {"id": 7, "username": "Band"},
    }
    return {
        "kind": "playlist",
        "id": 9,
        "title": "Best Of",
        "user": {"id": 7, "username": "Band"},
        "tracks": [sample_track_data, second],
    }


@pytest.fixture
def soundcloud_client():
    """Mock SoundCloud client; configure return values per test"""
    client = Mock()
    client.client_id = CLIENT_ID
    client.api_base = API_BASE
    return client


@pytest.fixture
def bandcamp_pages():
    """URL -> page body served by the bandcamp_client fixture"""
    return {}


@pytest.fixture
def bandcamp_client(bandcamp_pages):
    """Mock Bandcamp client serving bodies from bandcamp_pages"""
    def get_page(url):
        if url not in bandcamp_pages:
            raise TransportError(f"Bandcamp request failed (HTTP 404): {url}", status_code=404)
        return bandcamp_pages[url]

    client = Mock()
    client.get_page.side_effect = get_page
    return client


def _make_response(json_data=None, status_code=200, headers=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.is_redirect = status_code in (301, 302, 303, 307, 308) and "Location" in response.headers
    response.text = text
    response.__enter__ = Mock(return_value=response)
    response.__exit__ = Mock(return_value=False)

    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data

    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None

    return response


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects usable as context managers"""
    return _make_response


@pytest.fixture
def album_page():
    """Album page with two tracks embedded as TralbumData"""
    return SAMPLE_ALBUM_PAGE


@pytest.fixture
def malformed_album_page():
    """Album page whose per-track fields don't line up"""
    return MALFORMED_ALBUM_PAGE


@pytest.fixture
def catalog_page():
    """Label page linking two albums"""
    return SAMPLE_CATALOG_PAGE


@pytest.fixture
def tralbum_attribute_page():
    """Factory for pages embedding album data as a data-tralbum attribute"""
    return data_tralbum_page
