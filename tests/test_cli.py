"""
CLI tests for multigit.

The running Python interpreter is configured as the "git" executable via
MULTIGIT_GENERAL_GIT_EXECUTABLE, so commands such as `-c "print(...)"`
run for real in every checkout without needing git itself.
"""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from multigit import __version__
from multigit.cli import cli
from multigit.domain import ResolvedRepoSet
from multigit.exit_codes import ProviderError
from multigit.services.resolver_service import TargetResolver


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """A directory with three checkouts and one plain directory."""
    for name in ("beta", "alpha", "gamma"):
        (tmp_path / name / ".git").mkdir(parents=True)
    (tmp_path / "not-a-repo").mkdir()
    (tmp_path / "notes.txt").write_text("hello")

    monkeypatch.setenv("MULTIGIT_GENERAL_GIT_EXECUTABLE", sys.executable)
    monkeypatch.setenv("MULTIGIT_CONFIG", str(tmp_path / "missing-config.json"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


class TestBasics:

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "run git commands against many git repositories" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bad_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["-d", str(tmp_path / "nope"), "status"])

        assert result.exit_code == 1
        assert "Not a directory" in result.output

    def test_invalid_jobs(self, runner):
        result = runner.invoke(cli, ["-j", "0", "status"])
        assert result.exit_code == 2


class TestLocalFanOut:

    def test_runs_in_every_checkout_in_name_order(self, runner, workspace):
        code = "import os; print('in', os.path.basename(os.getcwd()))"
        result = runner.invoke(cli, ["-d", str(workspace), "--", "-c", code])

        assert result.exit_code == 0, result.output
        assert result.output == (
            "alpha\n    in alpha\n\n"
            "beta\n    in beta\n\n"
            "gamma\n    in gamma\n\n"
        )

    def test_partial_failure_exits_zero(self, runner, workspace):
        code = "import os, sys; name = os.path.basename(os.getcwd()); print(name); sys.exit(name == 'beta')"
        result = runner.invoke(cli, ["-d", str(workspace), "-j", "2", "--", "-c", code])

        assert result.exit_code == 0
        assert "beta ERROR\n    beta\n" in result.output
        assert "alpha\n    alpha\n" in result.output

    def test_total_failure_exits_one(self, runner, workspace):
        result = runner.invoke(cli, ["-d", str(workspace), "--", "-c", "raise SystemExit(2)"])

        assert result.exit_code == 1
        for name in ("alpha", "beta", "gamma"):
            assert f"{name} ERROR\n    exit status 2\n" in result.output

    def test_no_checkouts_is_success(self, runner, workspace):
        empty = workspace / "not-a-repo"
        result = runner.invoke(cli, ["-d", str(empty), "status"])

        assert result.exit_code == 0
        assert "No git repositories found" in result.output

    def test_git_arguments_pass_through_untouched(self, runner, workspace):
        code = "import sys; print(sys.argv[1:])"
        result = runner.invoke(cli, ["-d", str(workspace), "--", "-c", code, "--oneline", "-v", "-n", "3"])

        assert result.exit_code == 0
        assert "['--oneline', '-v', '-n', '3']" in result.output

    def test_timeout_option(self, runner, workspace):
        code = "import time; time.sleep(30)"
        result = runner.invoke(cli, ["-d", str(workspace), "--timeout", "0.5", "--", "-c", code])

        assert result.exit_code == 1
        assert "timed out after 0.5s" in result.output


class TestCloneMode:

    def test_wildcard_with_directory_is_setup_error(self, runner, workspace):
        result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@github.com:me/*", "dest"])

        assert result.exit_code == 1
        assert "Invalid directory for multi-clone" in result.output

    def test_unsupported_host(self, runner, workspace):
        result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@bitbucket.org:me/*"])

        assert result.exit_code == 1
        assert "bitbucket.org" in result.output

    def test_malformed_pattern(self, runner, workspace):
        with patch("multigit.commands.clone.build_resolver") as mock_build:
            mock_build.return_value = TargetResolver(MagicMock())
            result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@github.com:me/foo-[ab"])

        assert result.exit_code == 1
        assert "invalid pattern" in result.output

    def test_primary_listing_failure(self, runner, workspace):
        resolver = MagicMock(spec=TargetResolver)
        resolver.resolve.side_effect = ProviderError("GitHub API error 404 for users/ghost/repos: Not Found")

        with patch("multigit.commands.clone.build_resolver", return_value=resolver):
            result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@github.com:ghost/*"])

        assert result.exit_code == 1
        assert "Not Found" in result.output

    def test_no_matching_repositories(self, runner, workspace):
        resolver = MagicMock(spec=TargetResolver)
        resolver.resolve.return_value = ResolvedRepoSet(account="me", names=[])

        with patch("multigit.commands.clone.build_resolver", return_value=resolver):
            result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@github.com:me/zzz*"])

        assert result.exit_code == 0
        assert "No repositories found" in result.output

    def test_fan_out_clone(self, runner, workspace):
        resolver = MagicMock(spec=TargetResolver)
        resolver.resolve.return_value = ResolvedRepoSet(account="me", names=["one", "two"])

        # The "git" executable is python, so `clone <address>` fails for every repo
        with patch("multigit.commands.clone.build_resolver", return_value=resolver):
            result = runner.invoke(cli, ["-d", str(workspace), "clone", "git@github.com:me/*"])

        assert result.exit_code == 1
        assert result.output.startswith("Cloning:\n    one\n    two\n")
        assert "one ERROR" in result.output
        assert "two ERROR" in result.output
