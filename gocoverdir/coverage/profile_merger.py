"""
Combines the per-directory cover profiles into a single profile.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Union

from gocoverdir.errors import FilesystemError
from gocoverdir.utils.scratch_area import ScratchArea

logger = logging.getLogger(__name__)


def merge_profile_contents(contents: Iterable[bytes]) -> bytes:
    """
    Concatenate profile contents, keeping only the first mode line.

    The first non-empty profile is copied as is. For every later profile the
    first line is dropped and the remaining lines are appended. Blocks are
    not merged; each directory is expected to describe its own files.
    """
    output = bytearray()
    for data in contents:
        if not output:
            output.extend(data)
            continue
        rest = b"\n".join(data.split(b"\n")[1:])
        if rest and not output.endswith(b"\n"):
            output.extend(b"\n")
        output.extend(rest)
    return bytes(output)


def merge_profiles(paths: Iterable[Union[str, Path]]) -> bytes:
    """
    Read and merge profile files in the given order.

    Raises:
        FilesystemError: If any file cannot be read
    """
    def read_all():
        for path in paths:
            try:
                yield Path(path).read_bytes()
            except OSError as e:
                raise FilesystemError(f"Could not read cover profile {path}: {e}") from e

    return merge_profile_contents(read_all())


def write_profile(path: Union[str, Path], data: bytes) -> None:
    """
    Write the combined profile atomically.

    The data goes to a temporary file next to `path` which then replaces the
    destination, so a failed write never leaves a truncated profile behind.

    Raises:
        FilesystemError: If the profile cannot be written
    """
    path = Path(path)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".gocoverdir", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise FilesystemError(f"Could not write cover profile {path}: {e}") from e


def merge_scratch_area(scratch: ScratchArea, output_path: Union[str, Path]) -> bytes:
    """
    Merge every profile in the scratch area into `output_path`.

    An empty scratch area produces an empty profile.

    Returns:
        The merged profile contents
    """
    files = scratch.profile_files()
    logger.info("Merging %d cover profiles into %s", len(files), output_path)
    data = merge_profiles(files)
    write_profile(output_path, data)
    return data
