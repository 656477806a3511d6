"""
Exceptions raised while covering a source tree.

Every failure the tool knows how to describe derives from `GocoverdirError`.
The top-level entry point logs these without a stack trace, so the message
must carry all the diagnostic information needed.
"""

from typing import Optional


class GocoverdirError(Exception):
    """Base class for errors that abort a run."""

    def __init__(self, message: str):
        super().__init__(message.strip())

    @property
    def message(self) -> str:
        return self.args[0]


class ConfigurationError(GocoverdirError):
    """Invalid command line or configuration values."""


class FilesystemError(GocoverdirError):
    """A directory or profile file could not be read, created or written."""


class InvocationError(GocoverdirError):
    """The test runner could not be started or exited with a failure."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class ProfileFormatError(GocoverdirError):
    """A cover profile does not match the expected line format."""


class CoverageThresholdError(GocoverdirError):
    """The combined coverage is below the required percentage."""


class ReportGenerationError(GocoverdirError):
    """The HTML report generator failed."""
