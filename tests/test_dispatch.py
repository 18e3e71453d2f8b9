"""
Tests for the bounded concurrent dispatcher and the git client.

Real child processes are used (the running Python interpreter stands in
for git) so combined output, exit statuses and ordering are exercised
end to end.
"""

import sys
import threading
import time

import pytest

from multigit.domain import CommandSpec, Target, TargetResult
from multigit.infra.git_client import GitClient
from multigit.services.dispatch_service import DispatchService

PYTHON = sys.executable


def python_spec(code, **kwargs):
    """A spec running `python -c code <address>` for remote targets."""
    return CommandSpec(args=("-c", code), executable=PYTHON, **kwargs)


def remote_targets(*names):
    return [Target.remote(name, "") for name in names]


class RecordingClient(GitClient):
    """GitClient stand-in that sleeps instead of forking and tracks concurrency."""

    def __init__(self, delay=0.05, fail=()):
        super().__init__()
        self.delay = delay
        self.fail = set(fail)
        self.lock = threading.Lock()
        self.active = 0
        self.max_active = 0
        self.calls = []

    def run(self, target, argv, cwd=None):
        with self.lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.calls.append(target.name)
        time.sleep(self.delay)
        with self.lock:
            self.active -= 1
        if target.name in self.fail:
            return TargetResult(target=target, failed=True, error_detail="exit status 1", returncode=1)
        return TargetResult(target=target, output=f"{target.name} done\n", returncode=0)


# ============================================================================
# GitClient
# ============================================================================

class TestGitClient:

    def test_combined_output_in_emission_order(self):
        code = (
            "import sys\n"
            "print('to stdout'); sys.stdout.flush()\n"
            "print('to stderr', file=sys.stderr); sys.stderr.flush()\n"
            "print('stdout again')"
        )
        target = Target.local("t", ".")
        result = GitClient().run(target, [PYTHON, "-c", code])

        assert not result.failed
        assert result.returncode == 0
        assert result.output.splitlines() == ['to stdout', 'to stderr', 'stdout again']
        assert result.error_detail is None

    def test_nonzero_exit_without_output_keeps_detail(self):
        result = GitClient().run(Target.local("t", "."), [PYTHON, "-c", "raise SystemExit(3)"])

        assert result.failed
        assert result.returncode == 3
        assert result.output == ""
        assert result.error_detail == "exit status 3"

    def test_nonzero_exit_with_output_drops_detail(self):
        code = "import sys; print('fatal: not a git repository', file=sys.stderr); sys.exit(128)"
        result = GitClient().run(Target.local("t", "."), [PYTHON, "-c", code])

        assert result.failed
        assert "fatal: not a git repository" in result.output
        assert result.error_detail is None

    def test_missing_executable(self, tmp_path):
        missing = str(tmp_path / "no-such-git")
        result = GitClient().run(Target.local("t", "."), [missing, "status"])

        assert result.failed
        assert result.returncode is None
        assert result.output == ""
        assert result.error_detail
        assert "no-such-git" in result.error_detail

    def test_runs_in_given_directory(self, tmp_path):
        code = "import os; print(os.getcwd())"
        result = GitClient().run(Target.local("t", str(tmp_path)), [PYTHON, "-c", code], cwd=str(tmp_path))

        assert result.output.strip() == str(tmp_path.resolve())

    def test_timeout_kills_child(self):
        client = GitClient(timeout=0.5)
        start = time.time()
        result = client.run(Target.local("t", "."), [PYTHON, "-c", "import time; time.sleep(30)"])

        assert time.time() - start < 15
        assert result.failed
        assert result.error_detail == "timed out after 0.5s"

    def test_zero_timeout_means_no_timeout(self):
        assert GitClient(timeout=0).timeout is None

    def test_passthrough_returns_exit_code(self):
        assert GitClient().run_passthrough([PYTHON, "-c", "raise SystemExit(0)"]) == 0
        assert GitClient().run_passthrough([PYTHON, "-c", "raise SystemExit(2)"]) == 2


# ============================================================================
# DispatchService
# ============================================================================

class TestDispatchService:

    def test_one_result_per_target_index_aligned(self):
        targets = remote_targets(*(f"r{i}" for i in range(20)))
        client = RecordingClient(delay=0.01)

        summary = DispatchService(client).dispatch(targets, python_spec("pass"), limit=4)

        assert summary.total == 20
        assert sorted(client.calls) == sorted(t.name for t in targets)
        assert [r.target for r in summary.results] == targets

    def test_concurrency_limit_respected(self):
        targets = remote_targets(*(f"r{i}" for i in range(12)))
        client = RecordingClient(delay=0.1)

        DispatchService(client).dispatch(targets, python_spec("pass"), limit=3)

        assert client.max_active <= 3
        assert client.max_active >= 2

    def test_results_follow_input_order_not_completion_order(self):
        # Later targets finish first
        code = "import sys, time; n = int(sys.argv[1]); time.sleep((5 - n) * 0.15); print('target', n)"
        targets = remote_targets("0", "1", "2", "3", "4")
        completed = []

        summary = DispatchService(GitClient()).dispatch(
            targets,
            python_spec(code),
            limit=5,
            on_result=lambda index, result: completed.append(index),
        )

        assert completed[0] != 0
        assert sorted(completed) == [0, 1, 2, 3, 4]
        assert [r.target.name for r in summary.results] == ["0", "1", "2", "3", "4"]
        assert [r.output.strip() for r in summary.results] == [f"target {n}" for n in range(5)]

    def test_failures_do_not_cancel_siblings(self):
        targets = remote_targets("a", "b", "c", "d")
        client = RecordingClient(delay=0.02, fail={"a", "c"})

        summary = DispatchService(client).dispatch(targets, python_spec("pass"), limit=2)

        assert len(client.calls) == 4
        assert summary.failed == 2
        assert [r.failed for r in summary.results] == [True, False, True, False]

    def test_real_processes_mixed_outcomes(self):
        code = "import sys; name = sys.argv[1]; print(name); sys.exit(1 if name.startswith('bad') else 0)"
        targets = remote_targets("good-1", "bad-1", "good-2")

        summary = DispatchService(GitClient()).dispatch(targets, python_spec(code), limit=2)

        assert [r.failed for r in summary.results] == [False, True, False]
        assert summary.results[1].output.strip() == "bad-1"

    def test_missing_executable_for_every_target(self, tmp_path):
        spec = CommandSpec(args=("status",), executable=str(tmp_path / "missing-git"))
        targets = [Target.local(n, str(tmp_path)) for n in ("x", "y")]

        summary = DispatchService(GitClient()).dispatch(targets, spec, limit=2)

        assert summary.failed == 2
        assert all(r.error_detail for r in summary.results)

    def test_local_targets_run_in_their_directory(self, tmp_path):
        dirs = []
        for name in ("one", "two"):
            d = tmp_path / name
            d.mkdir()
            dirs.append(d)
        targets = [Target.local(d.name, str(d)) for d in dirs]
        spec = python_spec("import os; print(os.path.basename(os.getcwd()))")

        summary = DispatchService(GitClient()).dispatch(targets, spec, limit=2)

        assert [r.output.strip() for r in summary.results] == ["one", "two"]

    def test_empty_target_list(self):
        client = RecordingClient()
        summary = DispatchService(client).dispatch([], python_spec("pass"), limit=4)

        assert summary.total == 0
        assert summary.failed == 0
        assert client.calls == []

    def test_limit_below_one_rejected(self):
        with pytest.raises(ValueError):
            DispatchService(RecordingClient()).dispatch(remote_targets("a"), python_spec("pass"), limit=0)

    def test_unexpected_client_error_becomes_failed_result(self):
        class BrokenClient(GitClient):
            def run(self, target, argv, cwd=None):
                if target.name == "boom":
                    raise RuntimeError("client exploded")
                return TargetResult(target=target, output="ok")

        targets = remote_targets("fine", "boom")
        summary = DispatchService(BrokenClient()).dispatch(targets, python_spec("pass"), limit=2)

        assert summary.results[0].failed is False
        assert summary.results[1].failed is True
        assert summary.results[1].error_detail == "client exploded"
