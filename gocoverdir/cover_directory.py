#!/usr/bin/env python3
"""
Entry point: run go test with coverage over a whole source tree.

Walks the current directory, runs `go test -cover` in every directory that
holds Go files, merges the resulting profiles into one and optionally prints
or enforces the combined statement coverage.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from gocoverdir.cli.arguments import parse_args
from gocoverdir.config.run_config import RunConfiguration
from gocoverdir.coverage import (
    calculate_coverage,
    format_coverage_summary,
    generate_html_report,
    meets_threshold,
    merge_scratch_area
)
from gocoverdir.discovery import cover_directory
from gocoverdir.errors import CoverageThresholdError, GocoverdirError
from gocoverdir.run_context import RunContext
from gocoverdir.utils.colors import error, supports_color
from gocoverdir.utils.logging import LogSinks, setup_logging
from gocoverdir.utils.runner_detector import detect_test_runner, runner_command
from gocoverdir.utils.scratch_area import ScratchArea

logger = logging.getLogger("gocoverdir")


def handle_coverage(config: RunConfiguration) -> Optional[float]:
    """
    Produce the reports requested for the combined profile.

    Returns:
        The coverage percentage, or None if neither printing nor a threshold
        was requested

    Raises:
        ReportGenerationError: If the HTML report cannot be generated
        CoverageThresholdError: If coverage is below -requiredcoverage
    """
    if config.htmlcoverage:
        generate_html_report(config.coverprofile)

    if not config.wants_coverage:
        return None

    coverage = calculate_coverage(config.coverprofile)

    if config.printcoverage:
        print(format_coverage_summary(coverage))
        sys.stdout.flush()

    if config.requiredcoverage > 0.0 and not meets_threshold(coverage, config.requiredcoverage):
        raise CoverageThresholdError(
            f"Code coverage {coverage:f} less than required {config.requiredcoverage:f}.  "
            f"See {config.coverprofile} to debug or run "
            f"'go tool cover -html {config.coverprofile} -o /tmp/cover.html'"
        )
    return coverage


def run(config: RunConfiguration, sinks: LogSinks, root: str = ".") -> Optional[float]:
    """
    Cover `root`, merge the profiles and report on them.

    The scratch area is removed before this returns, whatever the outcome.
    """
    runner = runner_command(detect_test_runner(Path.cwd()))
    if runner[0] == "godep":
        logger.info("Godeps directory found, running tests through godep")

    with ScratchArea() as scratch:
        context = RunContext(config=config, scratch=scratch, sinks=sinks, runner=runner)
        logger.info("Setup done")
        cover_directory(context, root, 0)
        merge_scratch_area(scratch, config.coverprofile)
        return handle_coverage(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)

    try:
        sinks = setup_logging(args.logfile, args.log_level)
    except OSError as e:
        print(error(f"Could not open log file {args.logfile}: {e}", supports_color()), file=sys.stderr)
        return 1

    try:
        config = RunConfiguration.from_args(args)
        run(config, sinks)
    except GocoverdirError as e:
        logger.error("%s", e.message)
        sinks.dump()
        if sinks.mode == "file":
            print(error(e.message, supports_color()), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        sinks.dump()
        return 130
    except Exception:
        logger.exception("Unexpected error")
        sinks.dump()
        raise
    finally:
        sinks.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
