"""Test configuration loading"""

from pathlib import Path

import pytest

from streamgrab.core.config import (
    DEFAULT_API_BASE,
    DEFAULT_CLIENT_ID,
    DEFAULT_USER_AGENT,
    load_config,
)
from streamgrab.core.exceptions import ConfigError


def write_config(directory: Path, content: str) -> Path:
    path = directory / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test config.yaml parsing"""

    def test_defaults_without_file(self, temp_dir, monkeypatch):
        """Test built-in defaults when ./config.yaml doesn't exist"""
        monkeypatch.chdir(temp_dir)

        config = load_config()

        assert config.soundcloud.client_id == DEFAULT_CLIENT_ID
        assert config.soundcloud.api_base == DEFAULT_API_BASE
        assert config.output.directory == temp_dir.resolve()
        assert config.output.write_logs is True
        assert config.user.include_favourites is False
        assert config.fetch.threads == 1
        assert config.fetch.user_agent == DEFAULT_USER_AGENT
        assert config.verbose is False

    def test_full_file(self, temp_dir):
        path = write_config(temp_dir, """
soundcloud:
  client_id: "my_id"
  api_base: "https://api.example.com/"
output:
  directory: "playlists"
  write_logs: false
user:
  include_favourites: true
  include_sets: true
fetch:
  timeout: 10
  threads: 4
  user_agent: "custom/1.0"
verbose: true
""")

        config = load_config(path)

        assert config.soundcloud.client_id == "my_id"
        assert config.soundcloud.api_base == "https://api.example.com"
        assert config.output.directory.is_absolute()
        assert config.output.directory.name == "playlists"
        assert config.output.write_logs is False
        assert config.user.include_favourites is True
        assert config.user.include_sets is True
        assert config.fetch.timeout == 10.0
        assert config.fetch.threads == 4
        assert config.fetch.user_agent == "custom/1.0"
        assert config.verbose is True

    def test_home_expanded(self, temp_dir):
        path = write_config(temp_dir, 'output:\n  directory: "~/Music"\n')

        assert load_config(path).output.directory == (Path.home() / "Music").resolve()

    def test_cwd_config_used(self, temp_dir, monkeypatch):
        write_config(temp_dir, "user:\n  include_sets: true\n")
        monkeypatch.chdir(temp_dir)

        assert load_config().user.include_sets is True

    def test_empty_file(self, temp_dir):
        assert load_config(write_config(temp_dir, "")).fetch.threads == 1

    def test_explicit_missing_file(self, temp_dir):
        with pytest.raises(ConfigError):
            load_config(temp_dir / "missing.yaml")

    @pytest.mark.parametrize("content", [
        "soundcloud: [unclosed",
        "- just\n- a list\n",
        "soundcloud: not-a-dict\n",
        'soundcloud:\n  client_id: ""\n',
        "user:\n  include_sets: yes-please\n",
        "fetch:\n  timeout: 0\n",
        "fetch:\n  timeout: true\n",
        "fetch:\n  threads: 0\n",
        "fetch:\n  threads: 2.5\n",
        'fetch:\n  user_agent: "  "\n',
        'output:\n  directory: ""\n',
    ])
    def test_invalid(self, temp_dir, content):
        """Test invalid files are rejected"""
        with pytest.raises(ConfigError):
            load_config(write_config(temp_dir, content))

    def test_frozen(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        config = load_config()

        with pytest.raises(AttributeError):
            config.verbose = True
