"""Scoped temporary directories."""

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from hoist.utils.logging import get_logger

logger = get_logger(__name__)


def remove_dir(path: str | Path) -> None:
    """Remove a directory tree, logging instead of raising on failure."""
    try:
        shutil.rmtree(path)
        logger.debug("temp_dir_removed", path=str(path))
    except OSError as e:
        logger.warning("temp_dir_cleanup_failed", path=str(path), error=str(e))


@contextmanager
def scoped_temp_dir(prefix: str = "hoist-") -> Iterator[Path]:
    """Create a temporary directory that is removed when the block exits."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        remove_dir(path)
