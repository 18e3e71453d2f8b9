"""
Git client infrastructure for multigit.

Provides a clean abstraction over git process execution.
All child processes go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import subprocess
import logging
from typing import List, Optional

from ..domain.target import Target
from ..domain.result import TargetResult

logger = logging.getLogger(__name__)


class GitClient:
    """
    Abstraction over external git invocations.

    Example:
        client = GitClient(timeout=300)
        result = client.run(target, ["git", "status", "-s"], cwd="/src/repo")
        if result.failed:
            print(result.error_detail or result.output)
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize GitClient.

        Args:
            timeout: Per-invocation timeout in seconds (None waits forever)
        """
        self.timeout = timeout or None

    def run(self, target: Target, argv: List[str], cwd: Optional[str] = None) -> TargetResult:
        """
        Run one command for a target, capturing combined output.

        Never raises for process-level failures; they are recorded in the
        returned TargetResult.

        Args:
            target: Target the invocation belongs to
            argv: Full argument vector, executable first
            cwd: Working directory for the child

        Returns:
            TargetResult for this target
        """
        logger.debug(f"Running in '{cwd or '.'}': {' '.join(argv)}")

        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            logger.debug(f"Could not start {argv[0]} for {target.name}: {e}")
            return TargetResult(target=target, failed=True, error_detail=str(e))

        try:
            raw, _ = proc.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            raw, _ = proc.communicate()
            output = _decode(raw)
            logger.warning(f"{target.name}: killed after {self.timeout:g}s")
            return TargetResult(
                target=target,
                output=output,
                failed=True,
                error_detail=None if output.strip() else f"timed out after {self.timeout:g}s",
                returncode=proc.returncode,
            )

        output = _decode(raw)
        if proc.returncode != 0:
            return TargetResult(
                target=target,
                output=output,
                failed=True,
                error_detail=None if output.strip() else f"exit status {proc.returncode}",
                returncode=proc.returncode,
            )

        return TargetResult(target=target, output=output, returncode=proc.returncode)

    def run_passthrough(self, argv: List[str], cwd: Optional[str] = None) -> int:
        """
        Run a command with inherited standard streams.

        Returns:
            The child's exit code

        Raises:
            OSError: If the executable cannot be started
        """
        logger.debug(f"Running in '{cwd or '.'}': {' '.join(argv)}")
        result = subprocess.run(argv, cwd=cwd, check=False)
        return result.returncode


def _decode(raw: Optional[bytes]) -> str:
    return raw.decode('utf-8', errors='replace') if raw else ""
