import io
import os
import signal
import subprocess
import time

import psutil
import pytest

from gocoverdir.errors import InvocationError
from gocoverdir.utils.logging import LogSinks
from gocoverdir.utils.runner_detector import detect_test_runner, runner_command
from gocoverdir.utils.test_executor import (
    build_test_command,
    package_pattern,
    run_coverage_for_directory,
    terminate_process_tree
)


def test_default_command(make_context):
    context = make_context()

    cmd = build_test_command(context, "pkg/sub", "gocoverdirprofile1.cover")

    assert cmd == [
        "go", "test", "-cover",
        "-covermode", "set",
        "-coverprofile", "gocoverdirprofile1.cover",
        "-outputdir", str(context.scratch.path),
        "-timeout", "3s",
        "./pkg/sub",
    ]


def test_optional_flags(make_context):
    context = make_context(covermode="atomic", cpu=0, race=True, timeout=90)

    cmd = build_test_command(context, ".", "p.cover")

    assert cmd[cmd.index("-covermode") + 1] == "atomic"
    assert cmd[cmd.index("-timeout") + 1] == "1m30s"
    assert cmd[cmd.index("-cpu") + 1] == "0"
    assert "-race" in cmd
    assert cmd[-1] == "./."


def test_disabled_flags_are_left_out(make_context):
    cmd = build_test_command(make_context(timeout=0, cpu=-1), "a", "p.cover")

    assert "-timeout" not in cmd
    assert "-cpu" not in cmd
    assert "-race" not in cmd


def test_godep_wraps_go(make_context):
    cmd = build_test_command(make_context(runner=["godep", "go"]), "a", "p.cover")
    assert cmd[:3] == ["godep", "go", "test"]


def test_absolute_directories_are_passed_unchanged(tmp_path):
    assert package_pattern(tmp_path) == str(tmp_path)
    assert package_pattern("a/b") == "./a/b"


def test_detect_test_runner(tmp_path):
    assert detect_test_runner(tmp_path) == "go"
    (tmp_path / "Godeps").mkdir()
    assert detect_test_runner(tmp_path) == "godep"
    assert runner_command("godep") == ["godep", "go"]
    assert runner_command("go") == ["go"]


def test_godeps_file_is_not_a_marker(tmp_path):
    (tmp_path / "Godeps").write_text("")
    assert detect_test_runner(tmp_path) == "go"


def test_run_writes_profile_into_scratch_area(tmp_path, fake_go, make_context, monkeypatch, build_tree):
    build_tree(tmp_path / "src", ["pkg/x.go"])
    monkeypatch.chdir(tmp_path / "src")
    context = make_context(sinks=LogSinks(mode="buffer", buffer=io.StringIO()))

    profile = run_coverage_for_directory(context, "pkg")

    assert profile == context.scratch.path / "gocoverdirprofile1.cover"
    assert profile.read_text().startswith("mode: set\npkg/x.go:1.1,2.2 3 1\n")
    assert fake_go.test_targets() == ["pkg"]
    assert "ok" in context.sinks.buffer.getvalue()


def test_profile_names_are_unique_per_run(fake_go, make_context):
    context = make_context(sinks=LogSinks(mode="buffer", buffer=io.StringIO()))

    first = run_coverage_for_directory(context, "a")
    second = run_coverage_for_directory(context, "b")

    assert first != second
    assert sorted(p.name for p in context.scratch.profile_files()) == [first.name, second.name]


def test_failing_tests_raise(fake_go, make_context, monkeypatch):
    monkeypatch.setenv("FAKE_GO_FAIL_ON", "broken")
    context = make_context(sinks=LogSinks(mode="buffer", buffer=io.StringIO()))

    with pytest.raises(InvocationError) as excinfo:
        run_coverage_for_directory(context, "broken")

    assert excinfo.value.returncode == 1
    assert "broken" in str(excinfo.value)
    assert "FAIL" in context.sinks.buffer.getvalue()
    assert context.scratch.profile_files() == []


def test_runner_that_cannot_start(make_context):
    context = make_context(runner=["gocoverdir-no-such-runner"])

    with pytest.raises(InvocationError) as excinfo:
        run_coverage_for_directory(context, "a")

    assert excinfo.value.returncode is None


def test_output_is_appended_to_log_file(tmp_path, fake_go, make_context):
    log_path = tmp_path / "run.log"
    with open(log_path, "a", encoding="utf-8") as stream:
        sinks = LogSinks(mode="file", stdout=stream, stderr=stream, logfile=stream)
        run_coverage_for_directory(make_context(sinks=sinks), "a")

    assert "ok" in log_path.read_text()


def test_interrupt_terminates_runner_and_closes_pipes(fake_go, make_context, interrupted_runner, process_gone):
    context = make_context(sinks=LogSinks(mode="buffer", buffer=io.StringIO()))

    with pytest.raises(KeyboardInterrupt):
        run_coverage_for_directory(context, "a")

    [(process, proc)] = interrupted_runner
    assert process_gone(proc)
    assert process.stdout.closed


@pytest.mark.skipif(os.name == "nt", reason="needs a POSIX shell")
def test_terminate_process_tree_kills_what_ignores_sigterm(process_gone):
    process = subprocess.Popen(["sh", "-c", "trap '' TERM; sleep 30; exit 0"])
    parent = psutil.Process(process.pid)
    deadline = time.monotonic() + 5
    while not parent.children() and time.monotonic() < deadline:
        time.sleep(0.05)
    procs = [parent] + parent.children(recursive=True)
    assert len(procs) == 2

    terminate_process_tree(process, timeout=0.5)

    assert process.wait(timeout=5) == -signal.SIGKILL
    assert all(process_gone(proc) for proc in procs)
