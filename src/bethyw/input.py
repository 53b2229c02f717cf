"""Input sources: local files and HTTP(S) URLs cached on disk."""

import hashlib
import logging
from pathlib import Path
from typing import TextIO
from urllib.parse import urlparse

import requests

from .errors import InputOpenError

log = logging.getLogger(__name__)

# Cache directory name for downloaded datasets
URL_CACHE_DIR_NAME = ".bethyw-url-cache"

# Default timeout for HTTP requests (in seconds)
DEFAULT_TIMEOUT = 30

DEFAULT_HEADERS = {
    "User-Agent": "bethyw/1.0 (StatsWales data parser)",
}


def is_url(path: str) -> bool:
    """Check if a path is an HTTP/HTTPS URL."""
    return path.startswith("http://") or path.startswith("https://")


def join_location(base: str, filename: str) -> str:
    """Join a data directory or base URL with a dataset file name.

    Examples:
        >>> join_location("datasets", "areas.csv")
        'datasets/areas.csv'
        >>> join_location("https://example.com/data", "areas.csv")
        'https://example.com/data/areas.csv'
    """
    if is_url(base):
        return f"{base.rstrip('/')}/{filename}"
    return str(Path(base) / filename)


def get_url_filename(url: str) -> str:
    """Extract filename from URL, or 'download' if the path is empty."""
    path = urlparse(url).path.rstrip("/")
    if path:
        return Path(path).name
    return "download"


def get_cache_path(url: str, cache_dir: Path) -> Path:
    """Deterministic cache path: a hash of the URL plus its filename."""
    url_hash = hashlib.sha256(url.encode()).hexdigest()[:16]
    return cache_dir / f"{url_hash}_{get_url_filename(url)}"


class InputSource:
    """A named location that can be opened as a text stream."""

    def __init__(self, source: str) -> None:
        self.source = source

    def open(self) -> TextIO:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


class InputFile(InputSource):
    """A local file, e.g. ``InputFile("datasets/areas.csv")``."""

    def open(self) -> TextIO:
        """Open the file as UTF-8 text. The caller closes the stream.

        Raises:
            InputOpenError: If the file cannot be opened.
        """
        try:
            return open(self.source, encoding="utf-8", newline="")
        except OSError as e:
            raise InputOpenError(f"Failed to open file {self.source}") from e


class InputUrl(InputSource):
    """A file downloaded over HTTP(S) into ``cache_dir`` on first use."""

    def __init__(
        self, source: str, cache_dir: Path, timeout: int = DEFAULT_TIMEOUT, force: bool = False
    ) -> None:
        super().__init__(source)
        self.cache_dir = cache_dir
        self.timeout = timeout
        self.force = force

    @property
    def cache_path(self) -> Path:
        return get_cache_path(self.source, self.cache_dir)

    def download(self) -> Path:
        """Download the URL unless it is already cached.

        Returns:
            Path to the local copy.

        Raises:
            InputOpenError: If the download fails.
        """
        cache_path = self.cache_path
        if not self.force and cache_path.exists():
            log.info("Using cached %s", cache_path)
            return cache_path

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        log.info("Downloading %s", self.source)
        try:
            response = requests.get(
                self.source, timeout=self.timeout, stream=True, headers=DEFAULT_HEADERS
            )
            response.raise_for_status()

            with open(cache_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
        except requests.RequestException as e:
            cache_path.unlink(missing_ok=True)
            raise InputOpenError(f"Failed to download URL {self.source}: {e}") from e

        return cache_path

    def open(self) -> TextIO:
        path = self.download()
        try:
            return open(path, encoding="utf-8", newline="")
        except OSError as e:
            raise InputOpenError(f"Failed to open file {path}") from e


def open_source(location: str, cache_dir: Path | None = None) -> InputSource:
    """Pick the input source for a location.

    Args:
        location: Local path or http(s) URL.
        cache_dir: Download cache for URLs (default: ``URL_CACHE_DIR_NAME``
            in the working directory).
    """
    if is_url(location):
        return InputUrl(location, cache_dir or Path(URL_CACHE_DIR_NAME))
    return InputFile(location)
