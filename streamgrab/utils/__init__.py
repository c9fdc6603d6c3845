"""
Helpers shared by the playlist writer and the site fetchers.

    sanitize_filename  playlist label -> safe file name (yt-dlp rules)
    ensure_directory   mkdir -p that returns its argument
    run_in_parallel    thread pool with a tqdm bar, used for catalog pages
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from tqdm import tqdm
from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize

from streamgrab.core.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def sanitize_filename(name: str, restricted: bool = False) -> str:
    """
    Make a playlist label usable as a file name.

    Path separators and characters rejected by common filesystems are
    replaced by yt-dlp. An empty result becomes "_".

        sanitize_filename("(Track) Song - Band")  # unchanged
        sanitize_filename("AC/DC")                # no "/" left
    """
    return yt_dlp_sanitize(name, restricted=restricted) or "_"


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def run_in_parallel(
    func: Callable[[T], R],
    items: Iterable[T],
    num_threads: int = 4,
    description: str = "Processing",
    show_progress: bool = True
) -> list[tuple[T, R | Exception]]:
    """
    Call func on every item from a pool of num_threads workers.

    Args:
        func: Single-argument callable, e.g. BandcampFetcher._catalog_album.
        items: Inputs; consumed once.
        num_threads: Pool size.
        description: Label of the progress bar.
        show_progress: Draw a tqdm bar while waiting.

    Returns:
        (item, value) pairs in input order. When func raised, value is
        the exception instead; one failing item never cancels the rest,
        so the caller decides which exceptions are fatal.
    """
    pending = list(items)
    values: list[R | Exception | None] = [None] * len(pending)

    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        positions = {pool.submit(func, item): n for n, item in enumerate(pending)}

        done = as_completed(positions)
        if show_progress:
            done = tqdm(done, total=len(pending), desc=description, unit="album")

        for future in done:
            n = positions[future]
            try:
                values[n] = future.result()
            except Exception as e:
                logger.debug(f"{description}: {pending[n]} raised {e!r}")
                values[n] = e

    return list(zip(pending, values))
