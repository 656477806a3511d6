import json
import os
import subprocess
import sys
import tempfile
import time
from pathlib import Path
from typing import List

import psutil
import pytest

from gocoverdir.config.run_config import RunConfiguration
from gocoverdir.run_context import RunContext
from gocoverdir.utils.logging import LogSinks
from gocoverdir.utils.scratch_area import ScratchArea

# Stand-in for the go tool. "go test" writes a two-block profile for the
# target (3 covered statements, 1 missed) into -outputdir; "go tool cover"
# writes a dummy HTML file. Every call is appended to $FAKE_GO_LOG as JSON.
FAKE_GO = '''#!{python}
import json, os, sys

args = sys.argv[1:]
log = os.environ.get("FAKE_GO_LOG")
if log:
    with open(log, "a") as f:
        f.write(json.dumps(args) + "\\n")

if args[:2] == ["tool", "cover"]:
    with open(args[args.index("-o") + 1], "w") as f:
        f.write("<html></html>")
    sys.exit(int(os.environ.get("FAKE_GO_HTML_EXIT", "0")))

if args and args[0] == "test":
    target = os.path.normpath(args[-1])
    if target == os.environ.get("FAKE_GO_FAIL_ON"):
        print("--- FAIL: TestSomething")
        sys.exit(1)
    profile = os.path.join(args[args.index("-outputdir") + 1], args[args.index("-coverprofile") + 1])
    with open(profile, "w") as f:
        f.write("mode: " + args[args.index("-covermode") + 1] + "\\n")
        f.write(target + "/x.go:1.1,2.2 3 1\\n")
        f.write(target + "/x.go:3.1,4.2 1 0\\n")
    print("ok  \\t" + target)
    sys.exit(0)

sys.exit(2)
'''


class FakeGo:
    def __init__(self, log_path: Path):
        self.log_path = log_path

    def calls(self) -> List[List[str]]:
        if not self.log_path.exists():
            return []
        return [json.loads(line) for line in self.log_path.read_text().splitlines()]

    def test_targets(self) -> List[str]:
        return [os.path.normpath(call[-1]) for call in self.calls() if call[0] == "test"]


@pytest.fixture
def fake_go(tmp_path, monkeypatch):
    """Put a fake `go` executable first on PATH."""
    if os.name == "nt":
        pytest.skip("fake go executable needs a POSIX shebang")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "go"
    script.write_text(FAKE_GO.format(python=sys.executable))
    script.chmod(0o755)

    log_path = tmp_path / "go-calls.jsonl"
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    monkeypatch.setenv("FAKE_GO_LOG", str(log_path))
    return FakeGo(log_path)


@pytest.fixture
def private_tempdir(tmp_path, monkeypatch):
    """Point tempfile at a fresh directory so scratch areas can be inspected."""
    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_root))
    return temp_root


@pytest.fixture
def make_context(tmp_path):
    """Build a RunContext with an open scratch area; extra kwargs go to RunConfiguration."""
    scratches = []

    def factory(sinks=None, runner=None, **config):
        config.setdefault("coverprofile", tmp_path / "coverage.out")
        scratch = ScratchArea(parent=tmp_path)
        scratch.create()
        scratches.append(scratch)
        return RunContext(
            config=RunConfiguration(**config),
            scratch=scratch,
            sinks=sinks or LogSinks(mode="stderr"),
            runner=runner or ["go"]
        )

    yield factory

    for scratch in scratches:
        scratch.remove()


def make_tree(root: Path, files: List[str]) -> Path:
    """Create files (and their parent directories) below root; entries ending in / are directories."""
    for rel in files:
        path = root / rel
        if rel.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("package x\n")
    return root


@pytest.fixture
def build_tree():
    return make_tree


@pytest.fixture
def interrupted_runner(monkeypatch):
    """Make every runner subprocess look like it was hit by Ctrl-C while waiting.

    Returns the list of (Popen, psutil.Process) pairs that were interrupted.
    """
    interrupted = []

    def communicate(self, *args, **kwargs):
        interrupted.append((self, psutil.Process(self.pid)))
        raise KeyboardInterrupt

    monkeypatch.setattr(subprocess.Popen, "communicate", communicate)
    return interrupted


def wait_until_gone(proc: psutil.Process, timeout: float = 5) -> bool:
    """True once the process has exited; zombies count as exited."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if proc.status() == psutil.STATUS_ZOMBIE:
                return True
        except psutil.NoSuchProcess:
            return True
        time.sleep(0.05)
    return False


@pytest.fixture
def process_gone():
    return wait_until_gone
