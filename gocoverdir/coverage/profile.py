"""
Cover profile data structures and parser.

A profile written by `go test -coverprofile` looks like:

    mode: set
    example.com/pkg/file.go:10.2,12.16 2 1

Each block line holds the file, start line.column, end line.column, the
number of statements in the block and how often the block ran.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union

from gocoverdir.errors import FilesystemError, ProfileFormatError

MODE_PREFIX = "mode: "

_BLOCK_LINE = re.compile(r"^(.+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$")


@dataclass
class ProfileBlock:
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    def same_position(self, other: "ProfileBlock") -> bool:
        return (self.start_line, self.start_col, self.end_line, self.end_col) == \
               (other.start_line, other.start_col, other.end_line, other.end_col)


@dataclass
class Profile:
    """Coverage data for one source file."""

    file_name: str
    mode: str
    blocks: List[ProfileBlock] = field(default_factory=list)

    @property
    def total_statements(self) -> int:
        return sum(b.num_stmt for b in self.blocks)

    @property
    def covered_statements(self) -> int:
        return sum(b.num_stmt for b in self.blocks if b.count > 0)


def parse_block_line(line: str) -> tuple:
    """Split a block line into (file name, ProfileBlock)."""
    match = _BLOCK_LINE.match(line)
    if not match:
        raise ProfileFormatError(f"line {line!r} doesn't match expected format")
    file_name = match.group(1)
    numbers = [int(g) for g in match.groups()[1:]]
    return file_name, ProfileBlock(*numbers)


def _merge_duplicate_blocks(profile: Profile) -> None:
    profile.blocks.sort(key=lambda b: (b.start_line, b.start_col))
    merged: List[ProfileBlock] = []
    for block in profile.blocks:
        if merged and block.same_position(merged[-1]):
            last = merged[-1]
            if block.num_stmt != last.num_stmt:
                raise ProfileFormatError(
                    f"inconsistent NumStmt in {profile.file_name}: changed from "
                    f"{last.num_stmt} to {block.num_stmt}"
                )
            if profile.mode == "set":
                last.count |= block.count
            else:
                last.count += block.count
            continue
        merged.append(block)
    profile.blocks = merged


def parse_profile_lines(lines: Iterable[str]) -> List[Profile]:
    """
    Parse cover profile lines into per-file profiles.

    Blank lines are skipped. Blocks that cover the same source range are
    merged: in "set" mode their counts are OR-ed, otherwise summed.

    Returns:
        Profiles sorted by file name; empty if there are no lines at all

    Raises:
        ProfileFormatError: If the mode line or any block line is malformed
    """
    mode = ""
    files: Dict[str, Profile] = {}

    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if not mode:
            if not line.startswith(MODE_PREFIX) or line == MODE_PREFIX:
                raise ProfileFormatError(f"bad mode line: {line}")
            mode = line[len(MODE_PREFIX):]
            continue

        file_name, block = parse_block_line(line)
        profile = files.get(file_name)
        if profile is None:
            profile = files[file_name] = Profile(file_name=file_name, mode=mode)
        profile.blocks.append(block)

    profiles = [files[name] for name in sorted(files)]
    for profile in profiles:
        _merge_duplicate_blocks(profile)
    return profiles


def parse_profiles(path: Union[str, Path]) -> List[Profile]:
    """
    Read and parse a cover profile file.

    Raises:
        FilesystemError: If the file cannot be read
        ProfileFormatError: If the content is malformed
    """
    try:
        with open(path, encoding='utf-8') as f:
            return parse_profile_lines(f)
    except OSError as e:
        raise FilesystemError(f"Could not read cover profile {path}: {e}") from e
