"""
Depth-first walk over a source tree that runs go test in every directory
holding Go files.
"""

import logging
import os
from typing import Callable, Iterable, List, Union

from gocoverdir.errors import FilesystemError
from gocoverdir.run_context import RunContext
from gocoverdir.utils.test_executor import run_coverage_for_directory

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".go",)

DirectoryRunner = Callable[[RunContext, str], object]


def list_directory(dirpath: str) -> List[os.DirEntry]:
    """
    List the entries of a directory sorted by name.

    Raises:
        FilesystemError: If the directory cannot be read
    """
    try:
        with os.scandir(dirpath) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise FilesystemError(f"Could not read directory {dirpath}: {e}") from e


def contains_go_files(entries: Iterable[os.DirEntry]) -> bool:
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        if os.path.splitext(entry.name)[1] in SOURCE_EXTENSIONS:
            return True
    return False


def cover_directory(
    context: RunContext,
    dirpath: Union[str, os.PathLike] = ".",
    depth: int = 0,
    runner: DirectoryRunner = run_coverage_for_directory
) -> None:
    """
    Cover `dirpath` and, recursively, its subdirectories.

    Directories deeper than the configured depth are skipped without error.
    Subdirectories whose name is in the ignore set are never entered, and
    symlinked directories are not followed. The first failure stops the walk.

    Args:
        context: Current run context
        dirpath: Directory to start from
        depth: Depth of `dirpath` below the starting directory
        runner: Called once for every directory that holds Go files
    """
    dirpath = os.fspath(dirpath)
    logger.info("Coverdir on %s", dirpath)
    if depth > context.config.depth:
        return

    entries = list_directory(dirpath)

    if contains_go_files(entries):
        logger.info("Go files in directory")
        runner(context, dirpath)

    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue
        if context.config.is_ignored(entry.name):
            logger.debug("Skipping ignored directory %s", entry.path)
            continue
        cover_directory(context, os.path.normpath(entry.path), depth + 1, runner)
