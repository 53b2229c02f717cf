"""Clearing the dataset download cache."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from send2trash import send2trash  # type: ignore[import-untyped]

log = logging.getLogger(__name__)


@dataclass
class CleanResult:
    """Result of cleaning a single cached path."""

    path: Path
    success: bool
    error: str | None = None
    action: Literal["trashed", "deleted", "skipped"] = "skipped"


def get_cached_files(cache_dir: Path) -> list[Path]:
    """List the files and directories held in the download cache."""
    if not cache_dir.is_dir():
        return []
    return sorted(cache_dir.iterdir())


def clear_url_cache(cache_dir: Path, permanent: bool = False) -> list[CleanResult]:
    """Remove every cached download.

    Args:
        cache_dir: The download cache directory.
        permanent: If True, permanently delete files. If False, move to trash.

    Returns:
        List of CleanResult objects describing what happened to each path.
    """
    results: list[CleanResult] = []

    for path in get_cached_files(cache_dir):
        try:
            if permanent:
                _delete_path(path)
                results.append(CleanResult(path=path, success=True, action="deleted"))
            else:
                send2trash(str(path))
                results.append(CleanResult(path=path, success=True, action="trashed"))
        except OSError as e:
            log.warning("Could not remove %s: %s", path, e)
            results.append(CleanResult(path=path, success=False, error=str(e)))

    return results


def _delete_path(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()
