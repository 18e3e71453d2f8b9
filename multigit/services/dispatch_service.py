"""
Command dispatch service for multigit.

Runs one command per target on a bounded pool of worker threads and
collects one TargetResult per target, index-aligned with the input.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from ..domain.target import Target, CommandSpec
from ..domain.result import TargetResult, DispatchSummary
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 12

ResultCallback = Callable[[int, TargetResult], None]


class DispatchService:
    """
    Fans a command out over many targets.

    Every target is run to completion even when siblings fail, and
    dispatch returns only once all of them have finished.

    Example:
        service = DispatchService(GitClient())
        spec = CommandSpec(args=("fetch", "--all"))
        summary = service.dispatch(targets, spec, limit=8)
        print(f"{summary.failed} of {summary.total} failed")
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def _run_one(self, target: Target, spec: CommandSpec) -> TargetResult:
        return self.git.run(target, spec.argv_for(target), cwd=spec.cwd_for(target))

    def dispatch(
        self,
        targets: List[Target],
        spec: CommandSpec,
        limit: int = DEFAULT_CONCURRENCY,
        on_result: Optional[ResultCallback] = None,
    ) -> DispatchSummary:
        """
        Run the command once per target, at most `limit` at a time.

        Args:
            targets: Targets in report order
            spec: Command template
            limit: Maximum concurrent child processes
            on_result: Called with (index, result) as each target finishes,
                always from the calling thread

        Returns:
            DispatchSummary whose results line up with `targets`
        """
        if limit < 1:
            raise ValueError(f"concurrency limit must be at least 1, got {limit}")

        results: List[Optional[TargetResult]] = [None] * len(targets)
        if not targets:
            return DispatchSummary(results=[])

        workers = min(limit, len(targets))
        logger.debug(f"Dispatching {len(targets)} targets on {workers} workers")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="multigit") as executor:
            futures = {
                executor.submit(self._run_one, target, spec): index
                for index, target in enumerate(targets)
            }

            # Only this thread writes to results, one slot per target
            for future in as_completed(futures):
                index = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error(f"Unexpected error running {targets[index].name}: {e}")
                    result = TargetResult(target=targets[index], failed=True, error_detail=str(e))
                results[index] = result
                if on_result is not None:
                    on_result(index, result)

        summary = DispatchSummary(results=results)
        logger.debug(f"Dispatch finished: {summary.failed} of {summary.total} targets failed")
        return summary
