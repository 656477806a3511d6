# utils package

"""
Utilities module for common functionality.
"""

from .logging import setup_logging, LogSinks
from .duration import parse_duration, format_duration
from .scratch_area import ScratchArea
from .runner_detector import detect_test_runner, runner_command

__all__ = [
    'setup_logging',
    'LogSinks',
    'parse_duration',
    'format_duration',
    'ScratchArea',
    'detect_test_runner',
    'runner_command'
]
