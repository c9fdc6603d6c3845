"""
Configuration management for streamgrab.

Reads config.yaml into a Config value. Configuration is an explicit, frozen value:
it is loaded once by the CLI and passed into the pipeline, never read
from module-level state.

Sections of config.yaml:
    - SoundCloud API client id (credential appended to stream URLs)
    - Output directory for generated playlists
    - Which extra playlists to generate for user profiles
    - HTTP timeout, user agent, and catalog worker threads

Configuration File Location:
    An explicit path can be given with --config. Otherwise config.yaml in
    the current working directory is used when it exists, and built-in
    defaults apply when it doesn't.

Example config.yaml:
    soundcloud:
      client_id: "your_client_id_here"

    output:
      directory: "~/Music/Playlists"
      write_logs: true

    user:
      include_favourites: false
      include_sets: false

    fetch:
      timeout: 30
      threads: 1
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from streamgrab import __version__
from streamgrab.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Public client id used when config.yaml sets none
DEFAULT_CLIENT_ID = "2t9loNQH90kzJcsFCODdigxfp325aq4z"
DEFAULT_API_BASE = "https://api.soundcloud.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"streamgrab/{__version__}"


@dataclass(frozen=True)
class SoundcloudConfig:
    """
    SoundCloud API configuration.

    Attributes:
        client_id: Application client id. Sent with every API call and
                   appended to every stream URL written to a playlist,
                   because the stream endpoint rejects anonymous requests.
        api_base: Base URL of the SoundCloud API.
    """
    client_id: str = DEFAULT_CLIENT_ID
    api_base: str = DEFAULT_API_BASE


@dataclass(frozen=True)
class OutputConfig:
    """
    Where playlists (and the logs directory) are written.

    Attributes:
        directory: Absolute path where playlist files are written.
                   Created on first write if it doesn't exist.
        write_logs: Whether to create the logs/ subdirectory with the
                    full, error and failure log files.
    """
    directory: Path
    write_logs: bool = True


@dataclass(frozen=True)
class UserConfig:
    """
    Extra playlists generated for SoundCloud user profile URLs.

    Attributes:
        include_favourites: Also write a "(Favourites) <user>" playlist.
        include_sets: Also write one playlist per set the user owns.
    """
    include_favourites: bool = False
    include_sets: bool = False


@dataclass(frozen=True)
class FetchConfig:
    """
    Network behaviour configuration.

    Attributes:
        timeout: Seconds before an HTTP request is abandoned.
        threads: Worker threads for Bandcamp catalog fan-out.
                 1 (default) processes albums strictly in discovery order.
        user_agent: User-Agent header sent with every request.
    """
    timeout: float = DEFAULT_TIMEOUT
    threads: int = 1
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class Config:
    """
    Everything a run needs, grouped by section.

    Created by load_config() and treated as immutable. The CLI applies
    its flags on top with dataclasses.replace().

    Attributes:
        soundcloud: SoundCloud API settings.
        output: Playlist and log destination.
        user: Extra playlists for user profiles.
        fetch: Network settings.
        verbose: Log DEBUG messages to the console.
    """
    soundcloud: SoundcloudConfig
    output: OutputConfig
    user: UserConfig
    fetch: FetchConfig
    verbose: bool = False


def default_config() -> Config:
    """Return the configuration used when no config.yaml exists."""
    return Config(
        soundcloud=SoundcloudConfig(),
        output=OutputConfig(directory=Path.cwd().resolve()),
        user=UserConfig(),
        fetch=FetchConfig(),
    )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: File given with --config, or None.
                     If None, config.yaml in the current working directory
                     is used when present; otherwise defaults are returned.

    Returns:
        The frozen Config.

    Raises:
        ConfigError: If an explicit config file is not found, the file has
                     invalid YAML syntax, or contains invalid values.

    Example:
        try:
            config = load_config()
        except ConfigError as e:
            print(f"Configuration error: {e.message}")
            sys.exit(2)
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return default_config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is valid and means "all defaults"
    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        soundcloud=_parse_soundcloud_config(_section(raw_config, "soundcloud")),
        output=_parse_output_config(_section(raw_config, "output")),
        user=_parse_user_config(_section(raw_config, "user")),
        fetch=_parse_fetch_config(_section(raw_config, "fetch")),
        verbose=_parse_bool(raw_config, "verbose", False),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return an optional section, validating it is a dictionary."""
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(
            f"'{key}' must be true or false",
            details={"field": key, "value": value}
        )
    return value


def _parse_soundcloud_config(section: dict[str, Any]) -> SoundcloudConfig:
    """
    Parse and validate the SoundCloud configuration section.

    Raises:
        ConfigError: If client_id or api_base is present but empty.
    """
    client_id = section.get("client_id", DEFAULT_CLIENT_ID)
    api_base = section.get("api_base", DEFAULT_API_BASE)

    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            "'soundcloud.client_id' must be a non-empty string",
            details={"field": "soundcloud.client_id"}
        )

    if not isinstance(api_base, str) or not api_base.strip():
        raise ConfigError(
            "'soundcloud.api_base' must be a non-empty string",
            details={"field": "soundcloud.api_base"}
        )

    return SoundcloudConfig(
        client_id=client_id.strip(),
        api_base=api_base.strip().rstrip("/")
    )


def _parse_output_config(section: dict[str, Any]) -> OutputConfig:
    """
    Build OutputConfig; the directory is made absolute with ~ expanded.
    Does NOT create the directory (that happens on first write).
    """
    directory = section.get("directory")

    if directory is None:
        path = Path.cwd().resolve()
    elif not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'output.directory' must be a non-empty string",
            details={"field": "output.directory"}
        )
    else:
        path = Path(directory.strip()).expanduser().resolve()

    return OutputConfig(
        directory=path,
        write_logs=_parse_bool(section, "write_logs", True)
    )


def _parse_user_config(section: dict[str, Any]) -> UserConfig:
    return UserConfig(
        include_favourites=_parse_bool(section, "include_favourites", False),
        include_sets=_parse_bool(section, "include_sets", False),
    )


def _parse_fetch_config(section: dict[str, Any]) -> FetchConfig:
    """
    Parse and validate the fetch configuration section.

    Raises:
        ConfigError: If timeout is not a positive number, threads is not a
                     positive integer, or user_agent is empty.
    """
    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    # bool is an int subclass; reject it explicitly
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(
            "'fetch.timeout' must be a positive number",
            details={"field": "fetch.timeout", "value": timeout}
        )

    threads = section.get("threads", 1)
    if isinstance(threads, bool) or not isinstance(threads, int) or threads < 1:
        raise ConfigError(
            "'fetch.threads' must be a positive integer",
            details={"field": "fetch.threads", "value": threads}
        )

    user_agent = section.get("user_agent", DEFAULT_USER_AGENT)
    if not isinstance(user_agent, str) or not user_agent.strip():
        raise ConfigError(
            "'fetch.user_agent' must be a non-empty string",
            details={"field": "fetch.user_agent"}
        )

    return FetchConfig(
        timeout=float(timeout),
        threads=threads,
        user_agent=user_agent.strip()
    )
