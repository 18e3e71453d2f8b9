"""
Handles fan-out of an arbitrary git command over local checkouts.

Every immediate child of the working directory that holds a git checkout
becomes a target; the command runs inside each of them.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..domain.target import Target, CommandSpec
from ..exit_codes import SUCCESS
from ..infra.git_client import GitClient
from ..progress import ProgressReporter
from ..render import print_report
from ..services.dispatch_service import DispatchService, DEFAULT_CONCURRENCY
from ..services.report_service import ReportService
from ..utils import local_targets


@dataclass
class RunOptions:
    """Settings shared by every fan-out mode."""
    workdir: str
    jobs: int = DEFAULT_CONCURRENCY
    timeout: Optional[float] = None
    git_executable: str = "git"

    @classmethod
    def from_config(cls, config: Dict[str, Any], workdir: str,
                    jobs: Optional[int] = None, timeout: Optional[float] = None) -> 'RunOptions':
        """Command-line values win over configuration."""
        general = config.get("general", {})
        return cls(
            workdir=workdir,
            jobs=jobs or int(general.get("max_concurrent") or DEFAULT_CONCURRENCY),
            timeout=timeout if timeout is not None else (float(general.get("timeout_seconds") or 0) or None),
            git_executable=general.get("git_executable") or "git",
        )


def fan_out(targets: List[Target], spec: CommandSpec, options: RunOptions,
            progress: ProgressReporter, description: str,
            dispatcher: Optional[DispatchService] = None) -> int:
    """
    Dispatch the command over all targets, print the report, return the exit code.
    """
    dispatcher = dispatcher or DispatchService(GitClient(timeout=options.timeout))
    finished = 0

    with progress.task(description, total=len(targets)) as update:
        def on_result(index, result):
            nonlocal finished
            finished += 1
            update(finished, result.name, failed=result.failed)

        summary = dispatcher.dispatch(targets, spec, limit=options.jobs, on_result=on_result)

    report = ReportService().build(targets, summary.results)
    print_report(report)

    if report.failed:
        progress(f"{report.failed} of {report.total} targets failed")
    return report.exit_code


def run_local(args: List[str], options: RunOptions, progress: ProgressReporter,
              dispatcher: Optional[DispatchService] = None) -> int:
    """
    Run `git <args>` in every checkout under the working directory.

    Returns:
        Exit code; success when nothing was found
    """
    targets = local_targets(options.workdir)
    if not targets:
        progress.warning(f"No git repositories found in {options.workdir}")
        return SUCCESS

    spec = CommandSpec(args=tuple(args), executable=options.git_executable)
    return fan_out(targets, spec, options, progress, f"Running git {' '.join(args)}", dispatcher)
