from pathlib import Path
from typing import List, Literal

TestRunner = Literal["go", "godep"]

GODEPS_DIR = "Godeps"


def detect_test_runner(repo_path: Path) -> TestRunner:
    """
    Detect which executable should run the tests.

    Args:
        repo_path: Directory the tool was started in

    Returns:
        "godep" if a Godeps directory exists, "go" otherwise
    """
    if (repo_path / GODEPS_DIR).is_dir():
        return "godep"
    return "go"


def runner_command(runner: TestRunner) -> List[str]:
    """Command prefix that ends in the `go` tool, wrapped by godep when needed."""
    if runner == "godep":
        return ["godep", "go"]
    return ["go"]
