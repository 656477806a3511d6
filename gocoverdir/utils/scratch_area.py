"""
Scratch area for per-directory cover profiles.
"""

import logging
import shutil
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from gocoverdir.errors import FilesystemError

logger = logging.getLogger(__name__)

PROFILE_PREFIX = "gocoverdirprofile"
PROFILE_SUFFIX = ".cover"


class ScratchArea:
    """
    Temporary directory that collects one cover profile per tested directory.

    Use it as a context manager: the directory is created on entry and removed,
    with everything in it, on exit whether or not the run failed.
    """

    def __init__(self, parent: Optional[Path] = None):
        self._parent = parent
        self._path: Optional[Path] = None
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("Scratch area has not been created")
        return self._path

    def create(self) -> Path:
        try:
            self._path = Path(tempfile.mkdtemp(prefix="gocoverdir", dir=self._parent))
        except OSError as e:
            raise FilesystemError(f"Could not create scratch directory: {e}") from e
        logger.info("coverdir %s", self._path)
        return self._path

    def remove(self) -> None:
        if self._path is None:
            return
        shutil.rmtree(self._path, ignore_errors=True)
        logger.debug("Removed scratch directory %s", self._path)
        self._path = None

    def next_profile_name(self) -> str:
        """Allocate a profile file name that is unique within this run."""
        with self._lock:
            self._counter += 1
            return f"{PROFILE_PREFIX}{self._counter}{PROFILE_SUFFIX}"

    def profile_files(self) -> List[Path]:
        """
        Regular files currently in the scratch area, sorted by name.

        Raises:
            FilesystemError: If the directory cannot be listed
        """
        try:
            entries = sorted(self.path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise FilesystemError(f"Could not list scratch directory {self.path}: {e}") from e
        return [entry for entry in entries if entry.is_file()]

    def __enter__(self) -> "ScratchArea":
        self.create()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.remove()
