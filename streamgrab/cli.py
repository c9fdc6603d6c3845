"""
Command-line interface for streamgrab.

This module implements the CLI using Click, turning one SoundCloud or
Bandcamp URL into M3U playlist files.
rich-click is used for the output colors.

Usage:
    # A single track or set
    streamgrab -u "https://soundcloud.com/someone/some-track"
    streamgrab -u "https://soundcloud.com/someone/sets/some-set"

    # A profile: uploads, plus favourites and every set
    streamgrab -u "https://soundcloud.com/someone" -f -s

    # A Bandcamp album, or every album on an artist/label page
    streamgrab -u "https://someband.bandcamp.com/album/some-album"
    streamgrab -u "https://somelabel.bandcamp.com" --threads 4

    # Write somewhere else, with a different client id
    streamgrab -u "https://..." -d ~/Music/Playlists --id <client_id>

Configuration:
    Flags override config.yaml, which overrides the built-in defaults.
    See streamgrab.core.config for the file format.

Exit Codes:
    0    Done (some playlists may have been skipped or failed)
    1    No URL provided, or an unexpected error
    2    Configuration error
    3    URL could not be resolved, or names an unsupported resource
    4    Any other error fetching or writing the requested resource
    5    Every playlist failed
    130  Interrupted
"""

import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "streamgrab": [
        {
            "name": "Input",
            "options": ["--url", "--dir"],
        },
        {
            "name": "SoundCloud Profiles",
            "options": ["--favourites", "--sets", "--id"],
        },
        {
            "name": "Advanced Options",
            "options": ["--threads", "--config", "--verbose"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from streamgrab import __version__
from streamgrab.core import (
    Config,
    ConfigError,
    MissingURLError,
    PlaylistOutcome,
    ResolutionError,
    StreamGrabError,
    TransportError,
    UnknownResourceError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from streamgrab.pipeline import run

logger = get_logger(__name__)


@click.command(name="streamgrab")
@click.option(
    "-u", "--url",
    type=str,
    default=None,
    metavar="<url>",
    help="SoundCloud or Bandcamp URL to generate playlists from"
)
@click.option(
    "-d", "--dir", "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<directory>",
    help="Directory to save generated playlists to"
)
@click.option(
    "--id", "client_id",
    type=str,
    default=None,
    metavar="<client-id>",
    help="Client id to use for the SoundCloud API"
)
@click.option(
    "-f", "--favourites",
    is_flag=True,
    help="For a profile URL, also write the user's favourited tracks"
)
@click.option(
    "-s", "--sets",
    is_flag=True,
    help="For a profile URL, also write one playlist per set"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose logging"
)
@click.option(
    "--threads",
    type=click.IntRange(min=1),
    default=None,
    metavar="<n>",
    help="Albums fetched in parallel for Bandcamp artist/label pages"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    url: Optional[str],
    output_dir: Optional[Path],
    client_id: Optional[str],
    favourites: bool,
    sets: bool,
    verbose: bool,
    threads: Optional[int],
    config_path: Optional[Path],
    version: bool
) -> None:
    """
    streamgrab: Turn SoundCloud and Bandcamp URLs into M3U playlists.

    Finds the stream URL of every track behind a link and writes them as
    extended M3U files. No audio is downloaded.

    \b
    SOUNDCLOUD:
        streamgrab -u "https://soundcloud.com/someone/some-track"
        streamgrab -u "https://soundcloud.com/someone/sets/some-set"
        streamgrab -u "https://soundcloud.com/someone" -f -s

    \b
    BANDCAMP:
        streamgrab -u "https://someband.bandcamp.com/album/some-album"
        streamgrab -u "https://somelabel.bandcamp.com"
    """
    if version:
        click.echo(f"streamgrab {__version__}")
        ctx.exit(0)

    outcomes: list[PlaylistOutcome] = []

    try:
        if url is None or not url.strip():
            raise MissingURLError("No URL provided")

        config = _apply_overrides(
            load_config(config_path),
            output_dir=output_dir,
            client_id=client_id,
            favourites=favourites,
            sets=sets,
            verbose=verbose,
            threads=threads,
        )

        logs_dir = setup_logging(
            config.output.directory if config.output.write_logs else None,
            verbose=config.verbose
        )
        logger.info(f"streamgrab {__version__} starting")
        if logs_dir is not None:
            logger.debug(f"Log files in {logs_dir}")

        outcomes = run(url, config)
        _print_summary(outcomes)

    except MissingURLError:
        click.echo("No URL provided. Use -u or --url option.", err=True)
        sys.exit(1)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(2)

    except ResolutionError as e:
        click.echo(f"Error: {e.message}", err=True)
        click.echo("Check that the URL exists and is public.", err=True)
        sys.exit(3)

    except UnknownResourceError as e:
        click.echo(f"Error: {e.message}", err=True)
        click.echo(
            "Try using a SoundCloud track, profile, or playlist URL, "
            "or a Bandcamp album, track or artist page.",
            err=True
        )
        sys.exit(3)

    except StreamGrabError as e:
        click.echo(f"Error: {e.message}", err=True)
        if isinstance(e, TransportError) and e.status_code in (401, 403):
            click.echo("Check your client_id in config.yaml or pass --id", err=True)
        logger.debug(f"Error details: {e.details}")
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()

    if outcomes and all(outcome.failed for outcome in outcomes):
        sys.exit(5)


def _apply_overrides(
    config: Config,
    output_dir: Path | None = None,
    client_id: str | None = None,
    favourites: bool = False,
    sets: bool = False,
    verbose: bool = False,
    threads: int | None = None
) -> Config:
    """
    Apply command line flags on top of the loaded configuration.

    Flags only ever switch options on; a flag that is absent keeps the
    value from config.yaml.

    Raises:
        ConfigError: If --id is given but empty.
    """
    if output_dir is not None:
        config = replace(
            config,
            output=replace(config.output, directory=output_dir.expanduser().resolve())
        )

    if client_id is not None:
        if not client_id.strip():
            raise ConfigError("--id must not be empty")
        config = replace(
            config,
            soundcloud=replace(config.soundcloud, client_id=client_id.strip())
        )

    if favourites or sets:
        config = replace(
            config,
            user=replace(
                config.user,
                include_favourites=config.user.include_favourites or favourites,
                include_sets=config.user.include_sets or sets,
            )
        )

    if threads is not None:
        config = replace(config, fetch=replace(config.fetch, threads=threads))

    if verbose:
        config = replace(config, verbose=True)

    return config


def _print_summary(outcomes: list[PlaylistOutcome]) -> None:
    """
    Print how many playlists were written, skipped and failed.

    Failed playlists are listed with the reason, so they can be retried
    individually.
    """
    written = [o for o in outcomes if o.written]
    skipped = [o for o in outcomes if o.skipped]
    failed = [o for o in outcomes if o.failed]

    logger.info("=" * 60)
    logger.info("SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Playlists written: {len(written)}")
    logger.info(f"Tracks written:    {sum(o.track_count for o in written)}")
    logger.info(f"Skipped (empty):   {len(skipped)}")
    logger.info(f"Failed:            {len(failed)}")
    for outcome in failed:
        logger.info(f"  - {outcome.source}: {outcome.error}")
    logger.info("=" * 60)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `streamgrab` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
