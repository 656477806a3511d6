"""
Coverage metrics data structures and calculation functions.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from .profile import Profile, parse_profiles

# Tolerance when comparing a computed percentage against the requirement
THRESHOLD_EPSILON = 0.001


@dataclass
class CoverageMetrics:
    """Statement counts summed over a set of profiles."""

    statements_covered: int = 0
    statements_total: int = 0

    def __post_init__(self):
        """Validate metrics after initialization."""
        if self.statements_covered < 0 or self.statements_total < 0:
            raise ValueError("Coverage counts cannot be negative")
        if self.statements_covered > self.statements_total:
            raise ValueError("Covered statements cannot exceed total statements")

    @property
    def statements_missed(self) -> int:
        return self.statements_total - self.statements_covered

    @property
    def percentage(self) -> float:
        """Calculate statement coverage percentage; 0.0 when there are no statements."""
        if self.statements_total == 0:
            return 0.0
        return self.statements_covered / self.statements_total * 100

    def meets_threshold(self, threshold: float) -> bool:
        return meets_threshold(self.percentage, threshold)

    @classmethod
    def from_profiles(cls, profiles: Iterable[Profile]) -> "CoverageMetrics":
        covered = 0
        total = 0
        for profile in profiles:
            covered += profile.covered_statements
            total += profile.total_statements
        return cls(statements_covered=covered, statements_total=total)


def meets_threshold(coverage: float, threshold: float) -> bool:
    """
    Check a coverage percentage against a requirement.

    The shortfall is compared at the precision of THRESHOLD_EPSILON, so
    79.9988% satisfies an 80% requirement while 79.998% does not.
    """
    shortfall = round(threshold - coverage, 3)
    return shortfall <= THRESHOLD_EPSILON


def calculate_coverage(profile_path: Union[str, Path]) -> float:
    """
    Compute statement coverage of a cover profile.

    Args:
        profile_path: Path to the combined profile

    Returns:
        Covered statements divided by total statements, as a percentage
    """
    return CoverageMetrics.from_profiles(parse_profiles(profile_path)).percentage


def format_coverage_summary(coverage: float) -> str:
    """Format the line printed by -printcoverage."""
    return f"coverage: {coverage:.1f}% of statements"
