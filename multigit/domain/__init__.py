"""
Domain layer for multigit.

Contains pure domain objects with no I/O or side effects:
- Target: One unit of fan-out work (local checkout or remote repository)
- CommandSpec: The command template run per target
- TargetResult: Outcome of one invocation
- DispatchSummary: All outcomes of one dispatch
- ResolvedRepoSet: Repository names a pattern resolved to
"""

from .target import Target, TargetKind, CommandSpec
from .result import TargetResult, DispatchSummary, ResolvedRepoSet

__all__ = [
    'Target',
    'TargetKind',
    'CommandSpec',
    'TargetResult',
    'DispatchSummary',
    'ResolvedRepoSet',
]
