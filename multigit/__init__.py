"""
multigit - run git commands against many git repositories at once.

Runs one git command concurrently across every checkout in a directory,
or clones every GitHub repository of an owner that matches a pattern,
and reports the outcome per repository in a stable order.

Quick Start:
    from multigit import Target, CommandSpec, DispatchService, ReportService

    targets = [Target.local("api", "/src/api"), Target.local("web", "/src/web")]
    summary = DispatchService().dispatch(targets, CommandSpec(args=("status", "-s")), limit=4)
    report = ReportService().build(targets, summary.results)
    print(report.text)

Domain Objects:
    Target - One local checkout or remote repository
    CommandSpec - The git argument template run per target
    TargetResult - Outcome of one invocation

Services:
    TargetResolver - Pattern-based repository discovery on GitHub
    DispatchService - Bounded concurrent fan-out
    ReportService - Ordered report and exit code
"""

__version__ = "0.1.0"

from .domain import (
    Target,
    TargetKind,
    CommandSpec,
    TargetResult,
    DispatchSummary,
    ResolvedRepoSet,
)

from .services import (
    TargetResolver,
    DispatchService,
    ReportService,
    Report,
)

from .config import load_config

__all__ = [
    "__version__",
    "Target",
    "TargetKind",
    "CommandSpec",
    "TargetResult",
    "DispatchSummary",
    "ResolvedRepoSet",
    "TargetResolver",
    "DispatchService",
    "ReportService",
    "Report",
    "load_config",
]
