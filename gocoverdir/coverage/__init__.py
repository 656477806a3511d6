"""
Coverage module for combined cover profiles.

This module provides:
- Cover profile parsing
- Merging of per-directory profiles
- Statement coverage calculation and threshold checks
- HTML report generation
"""

from .profile import Profile, ProfileBlock, parse_profiles, parse_profile_lines
from .profile_merger import merge_profile_contents, merge_profiles, merge_scratch_area, write_profile
from .coverage_metrics import CoverageMetrics, calculate_coverage, meets_threshold, format_coverage_summary
from .html_report import generate_html_report

__all__ = [
    'Profile',
    'ProfileBlock',
    'parse_profiles',
    'parse_profile_lines',
    'merge_profile_contents',
    'merge_profiles',
    'merge_scratch_area',
    'write_profile',
    'CoverageMetrics',
    'calculate_coverage',
    'meets_threshold',
    'format_coverage_summary',
    'generate_html_report'
]
