"""
gocoverdir

Runs `go test -cover` on every directory of a source tree that holds Go files
and combines the per-directory cover profiles into a single profile.

Sub-packages:
- cli: command line arguments
- config: run configuration model
- discovery: directory traversal
- coverage: profile model, merging and coverage calculation
- utils: logging, scratch area, runner invocation helpers
"""

__all__ = [
    "cli",
    "config",
    "coverage",
    "discovery",
    "utils",
]

__version__ = "0.1.0"
