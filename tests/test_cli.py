"""Test the command-line interface"""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from streamgrab import __version__
from streamgrab.cli import _apply_overrides, cli
from streamgrab.core.config import default_config
from streamgrab.core.exceptions import (
    ConfigError,
    MalformedAlbumError,
    ResolutionError,
    TransportError,
    UnknownResourceError,
)
from streamgrab.core.models import PlaylistOutcome


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(temp_dir, monkeypatch):
    """Run the CLI in an empty directory (no config.yaml)"""
    monkeypatch.chdir(temp_dir)
    return temp_dir


class TestExitCodes:
    """Test error to exit code mapping"""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_url(self, runner, cli_env):
        with patch("streamgrab.cli.run") as run:
            result = runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "No URL provided" in result.output
        run.assert_not_called()

    def test_config_error(self, runner, cli_env):
        (cli_env / "config.yaml").write_text("fetch:\n  threads: 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["-u", "https://soundcloud.com/band"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_empty_client_id(self, runner, cli_env):
        result = runner.invoke(cli, ["-u", "https://soundcloud.com/band", "--id", " "])

        assert result.exit_code == 2

    @pytest.mark.parametrize("error, code, hint", [
        (ResolutionError("Invalid URL provided (no resource found)"), 3, "public"),
        (UnknownResourceError("Unknown SoundCloud resource: comments"), 3, "Try using"),
        (TransportError("SoundCloud request failed (HTTP 401)", status_code=401), 4, "client_id"),
        (MalformedAlbumError("Track field count mismatch"), 4, "Error:"),
    ])
    def test_pipeline_errors(self, runner, cli_env, error, code, hint):
        with patch("streamgrab.cli.run", side_effect=error):
            result = runner.invoke(cli, ["-u", "https://soundcloud.com/band"])

        assert result.exit_code == code
        assert error.message in result.output
        assert hint in result.output

    def test_interrupted(self, runner, cli_env):
        with patch("streamgrab.cli.run", side_effect=KeyboardInterrupt):
            result = runner.invoke(cli, ["-u", "https://soundcloud.com/band"])

        assert result.exit_code == 130

    def test_all_failed(self, runner, cli_env):
        outcomes = [PlaylistOutcome.from_error("https://a.bandcamp.com/album/x", MalformedAlbumError("bad"))]

        with patch("streamgrab.cli.run", return_value=outcomes):
            result = runner.invoke(cli, ["-u", "https://a.bandcamp.com"])

        assert result.exit_code == 5

    def test_success(self, runner, cli_env):
        outcomes = [
            PlaylistOutcome(label="(Album) A by B", source="u1", path=cli_env / "a.m3u", track_count=3),
            PlaylistOutcome.from_error("u2", MalformedAlbumError("bad")),
        ]

        with patch("streamgrab.cli.run", return_value=outcomes) as run:
            result = runner.invoke(cli, ["-u", "https://a.bandcamp.com", "-d", str(cli_env / "out")])

        assert result.exit_code == 0
        url, config = run.call_args.args
        assert url == "https://a.bandcamp.com"
        assert config.output.directory == (cli_env / "out").resolve()

    def test_log_files_written(self, runner, cli_env):
        with patch("streamgrab.cli.run", return_value=[]):
            result = runner.invoke(cli, ["-u", "https://a.bandcamp.com", "-d", str(cli_env)])

        assert result.exit_code == 0
        logs = sorted(p.name.split("_")[0] for p in (cli_env / "logs").iterdir())
        assert logs == ["failures", "log", "log"]


class TestOverrides:
    """Test flags applied on top of config.yaml"""

    def test_flags(self, temp_dir):
        config = _apply_overrides(
            default_config(),
            output_dir=temp_dir,
            client_id="cli_id",
            favourites=True,
            sets=True,
            verbose=True,
            threads=3,
        )

        assert config.output.directory == temp_dir.resolve()
        assert config.soundcloud.client_id == "cli_id"
        assert config.user.include_favourites is True
        assert config.user.include_sets is True
        assert config.verbose is True
        assert config.fetch.threads == 3

    def test_absent_flags_keep_config(self):
        base = default_config()

        assert _apply_overrides(base) == base

    def test_empty_client_id(self):
        with pytest.raises(ConfigError):
            _apply_overrides(default_config(), client_id="")

    def test_home_directory(self):
        config = _apply_overrides(default_config(), output_dir=Path("~/Music"))

        assert config.output.directory == (Path.home() / "Music").resolve()
