"""
Run context passed to every traversal, invocation and merge step.
"""

from dataclasses import dataclass, field
from typing import List

from gocoverdir.config.run_config import RunConfiguration
from gocoverdir.utils.logging import LogSinks
from gocoverdir.utils.scratch_area import ScratchArea


@dataclass(frozen=True)
class RunContext:
    config: RunConfiguration
    scratch: ScratchArea
    sinks: LogSinks
    runner: List[str] = field(default_factory=lambda: ["go"])
