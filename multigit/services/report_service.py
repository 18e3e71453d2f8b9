"""
Report service for multigit.

Builds the per-target report blocks in target order and derives the
overall exit code from the number of failed targets.
"""

from dataclasses import dataclass, field
from typing import List

from rich.text import Text

from ..domain.target import Target
from ..domain.result import TargetResult
from ..exit_codes import exit_code_for_failures

INDENT = "    "
ERROR_MARKER = "ERROR"


@dataclass
class ReportBlock:
    """
    One target's block.

    The header carries the styling; output lines are kept verbatim so tabs
    and control sequences from git reach the terminal unchanged.
    """
    header: Text
    lines: List[str] = field(default_factory=list)

    @property
    def plain(self) -> str:
        return self.header.plain + "".join(self.lines) + "\n"


@dataclass
class Report:
    """Rendered outcome of a fan-out run."""
    blocks: List[ReportBlock] = field(default_factory=list)
    failed: int = 0
    total: int = 0

    @property
    def exit_code(self) -> int:
        return exit_code_for_failures(self.failed, self.total)

    @property
    def text(self) -> str:
        """Plain-text report, blocks concatenated."""
        return "".join(block.plain for block in self.blocks)


def render_block(result: TargetResult) -> ReportBlock:
    """
    Render one target's block.

    Header line with the name and, on failure, the error marker; the
    output indented one line at a time; a blank separator line. A failure
    without output shows its error detail instead.
    """
    header = Text()
    header.append(result.target.name, style="bold cyan")
    if result.failed:
        header.append(" ")
        header.append(ERROR_MARKER, style="bold red")
    header.append("\n")

    body = result.output.strip("\r\n")
    if body:
        lines = [INDENT + line.rstrip("\r") + "\n" for line in body.split("\n")]
        return ReportBlock(header=header, lines=lines)

    if result.failed:
        detail = result.error_detail or "failed without output"
        header.append(f"{INDENT}{detail}\n", style="red")
    return ReportBlock(header=header)


class ReportService:
    """Turns dispatch results into an ordered report."""

    def build(self, targets: List[Target], results: List[TargetResult]) -> Report:
        """
        Build the report.

        Args:
            targets: Targets in their original order
            results: One result per target, index-aligned with `targets`

        Returns:
            Report with blocks in target order

        Raises:
            ValueError: If the counts differ or a result belongs to another target
        """
        if len(results) != len(targets):
            raise ValueError(f"Expected {len(targets)} results, got {len(results)}")

        report = Report(total=len(targets))
        for target, result in zip(targets, results):
            if result.target != target:
                raise ValueError(f"Result for {result.target.name} does not match target {target.name}")
            if result.failed:
                report.failed += 1
            report.blocks.append(render_block(result))
        return report
