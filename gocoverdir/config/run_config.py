"""
Run configuration module.

Holds the settings of one run, built once from the parsed command line and
validated before any directory is walked.
"""

import os
import tempfile
from pathlib import Path
from typing import FrozenSet, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gocoverdir.errors import ConfigurationError

CoverMode = Literal["set", "count", "atomic"]

DEFAULT_IGNORE_DIRS = ".git:Godeps:vendor"


def default_coverprofile() -> Path:
    """Combined profile location used when -coverprofile is not given."""
    return Path(tempfile.gettempdir()) / "coverage.out"


def split_ignore_dirs(value: str) -> FrozenSet[str]:
    """Split a path-list string (":" on POSIX) into directory basenames."""
    return frozenset(name for name in value.split(os.pathsep) if name)


class RunConfiguration(BaseModel):
    """Immutable settings for a single run."""

    model_config = ConfigDict(frozen=True)

    covermode: CoverMode = Field(
        "set",
        description="Coverage mode passed to go test"
    )
    cpu: int = Field(
        -1,
        description="Value for go test -cpu; negative means the runner default"
    )
    race: bool = Field(False, description="Pass -race to go test")
    timeout: float = Field(
        3.0,
        description="Per-directory go test timeout in seconds; 0 or less disables it"
    )
    coverprofile: Path = Field(
        default_factory=default_coverprofile,
        description="Path of the combined cover profile"
    )
    depth: int = Field(10, description="Maximum directory depth to search")
    ignore_dirs: FrozenSet[str] = Field(
        default_factory=lambda: split_ignore_dirs(DEFAULT_IGNORE_DIRS),
        description="Directory basenames that are never descended into"
    )
    printcoverage: bool = Field(False, description="Print the coverage percentage to stdout")
    requiredcoverage: float = Field(
        0.0,
        description="Fail the run when coverage is below this percentage"
    )
    htmlcoverage: bool = Field(False, description="Generate an HTML coverage report")

    @field_validator("requiredcoverage")
    @classmethod
    def _check_required_coverage(cls, value: float) -> float:
        if not 0.0 <= value <= 100.0:
            raise ValueError(f"Required coverage must be >= 0 && <= 100, but is {value:f}")
        return value

    @property
    def wants_coverage(self) -> bool:
        """True when the coverage percentage has to be computed at all."""
        return self.printcoverage or self.requiredcoverage > 0.0

    def is_ignored(self, dirname: str) -> bool:
        return dirname in self.ignore_dirs

    @classmethod
    def from_args(cls, args) -> "RunConfiguration":
        """
        Build a configuration from parsed command line arguments.

        Raises:
            ConfigurationError: If any value fails validation
        """
        try:
            return cls(
                covermode=args.covermode,
                cpu=args.cpu,
                race=args.race,
                timeout=args.timeout,
                coverprofile=args.coverprofile,
                depth=args.depth,
                ignore_dirs=split_ignore_dirs(args.ignoredirs),
                printcoverage=args.printcoverage,
                requiredcoverage=args.requiredcoverage,
                htmlcoverage=args.htmlcoverage,
            )
        except ValidationError as e:
            raise ConfigurationError(describe_validation_error(e)) from e


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"])
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        problems.append(f"{field}: {message}" if field else message)
    return "; ".join(problems)
