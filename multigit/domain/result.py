"""
Result domain objects for multigit.

Provides the per-target outcome of one command invocation, the
summary of a whole dispatch, and the set of names a pattern resolved to.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .target import Target


@dataclass(frozen=True)
class TargetResult:
    """
    Outcome of running the command for one target.

    `output` holds stdout and stderr interleaved as the child wrote them.
    `error_detail` is only set for failures that produced no output, so a
    failed target always has something to show.
    """
    target: Target
    output: str = ""
    failed: bool = False
    error_detail: Optional[str] = None
    returncode: Optional[int] = None

    @property
    def name(self) -> str:
        return self.target.name


@dataclass
class DispatchSummary:
    """Results of one dispatch, index-aligned with the dispatched targets."""
    results: List[TargetResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)


@dataclass(frozen=True)
class ResolvedRepoSet:
    """Repository names matching a pattern within one account's listing."""
    account: str
    names: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(self.names)
