"""Test URL classification"""

from unittest.mock import Mock

import pytest

from streamgrab.core.exceptions import (
    MissingURLError,
    ResolutionError,
    UnknownResourceError,
)
from streamgrab.core.models import ResourceKind, Site
from streamgrab.core.resolver import (
    classify,
    classify_bandcamp,
    detect_site,
    parse_canonical_path,
)


class TestParseCanonicalPath:
    """Test canonical path parsing"""

    @pytest.mark.parametrize("path, expected", [
        ("/tracks/42", (ResourceKind.TRACK, 42)),
        ("/playlists/9", (ResourceKind.PLAYLIST, 9)),
        ("/users/1234", (ResourceKind.USER, 1234)),
        ("/users/7.json", (ResourceKind.USER, 7)),
        ("/tracks.json/42", (ResourceKind.TRACK, 42)),
        ("https://api.soundcloud.com/playlists/9?secret_token=x", (ResourceKind.PLAYLIST, 9)),
    ])
    def test_valid_paths(self, path, expected):
        """Test every supported resource type"""
        assert parse_canonical_path(path) == expected

    def test_unknown_resource_type(self):
        """Test an unsupported resource type"""
        with pytest.raises(UnknownResourceError):
            parse_canonical_path("/comments/5")

    def test_empty_path(self):
        """Test an empty path resolves to nothing"""
        with pytest.raises(ResolutionError):
            parse_canonical_path("")

    def test_missing_id(self):
        with pytest.raises(ResolutionError):
            parse_canonical_path("/tracks")

    @pytest.mark.parametrize("raw_id", ["abc", "\u00b2", "\u0663", "12\u00b3", "-5"])
    def test_non_numeric_id(self, raw_id):
        """Test ids int() would reject or misread are resolution errors"""
        with pytest.raises(ResolutionError):
            parse_canonical_path(f"/tracks/{raw_id}")


class TestDetectSite:
    """Test site detection"""

    def test_soundcloud(self):
        assert detect_site("https://soundcloud.com/band/song") is Site.SOUNDCLOUD
        assert detect_site("https://m.soundcloud.com/band") is Site.SOUNDCLOUD
        assert detect_site("soundcloud.com/band") is Site.SOUNDCLOUD

    def test_bandcamp(self):
        assert detect_site("https://band.bandcamp.com/album/x") is Site.BANDCAMP

    def test_lookalike_domain(self):
        """Test a host that merely contains the domain name"""
        with pytest.raises(UnknownResourceError):
            detect_site("https://notsoundcloud.com/band")

    def test_unsupported_site(self):
        with pytest.raises(UnknownResourceError):
            detect_site("https://open.spotify.com/playlist/abc")


class TestClassifyBandcamp:
    """Test Bandcamp classification (no network)"""

    def test_album(self):
        reference = classify_bandcamp("https://band.bandcamp.com/album/night-drive")

        assert reference.site is Site.BANDCAMP
        assert reference.kind is ResourceKind.ALBUM
        assert reference.id is None

    def test_track_page_is_album(self):
        """Test track pages are handled like albums"""
        assert classify_bandcamp("https://band.bandcamp.com/track/intro").kind is ResourceKind.ALBUM

    def test_catalog(self):
        for url in ("https://label.bandcamp.com", "https://label.bandcamp.com/music"):
            assert classify_bandcamp(url).kind is ResourceKind.CATALOG

    def test_bandcamp_home(self):
        """Test bandcamp.com itself is not a catalog"""
        with pytest.raises(UnknownResourceError):
            classify_bandcamp("https://bandcamp.com/discover")


class TestClassify:
    """Test full classification"""

    def test_empty_url(self):
        """Test empty input fails before any network call"""
        soundcloud = Mock()

        for url in ("", "   ", None):
            with pytest.raises(MissingURLError):
                classify(url, soundcloud)

        soundcloud.resolve.assert_not_called()

    def test_soundcloud_track(self):
        soundcloud = Mock()
        soundcloud.resolve.return_value = "/tracks/42"

        reference = classify("  https://soundcloud.com/band/song  ", soundcloud)

        soundcloud.resolve.assert_called_once_with("https://soundcloud.com/band/song")
        assert reference.site is Site.SOUNDCLOUD
        assert reference.kind is ResourceKind.TRACK
        assert reference.id == 42
        assert reference.locator == "https://soundcloud.com/band/song"

    def test_bandcamp_skips_resolver(self):
        soundcloud = Mock()

        reference = classify("https://band.bandcamp.com/album/x", soundcloud)

        assert reference.kind is ResourceKind.ALBUM
        soundcloud.resolve.assert_not_called()

    def test_resolution_failure_propagates(self):
        soundcloud = Mock()
        soundcloud.resolve.side_effect = ResolutionError("Invalid URL provided (no resource found)")

        with pytest.raises(ResolutionError):
            classify("https://soundcloud.com/nobody/nothing", soundcloud)

    def test_soundcloud_without_resolver(self):
        with pytest.raises(ResolutionError):
            classify("https://soundcloud.com/band/song")
