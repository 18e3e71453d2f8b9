"""
Progress reporting utilities for multigit.

Provides progress reporting on stderr that keeps stdout clean for the report.
"""

import sys
import os
import time
from contextlib import contextmanager
from typing import Optional


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    colors = {
        'reset': '\033[0m',
        'red': '\033[31m',
        'green': '\033[32m',
        'yellow': '\033[33m',
    }

    def __init__(self, enabled: Optional[bool] = None, use_colors: Optional[bool] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            use_colors: Use ANSI colors in output. None = auto-detect
        """
        if enabled is None:
            # Auto-detect: show progress if stderr is a terminal
            self.enabled = sys.stderr.isatty()
        else:
            self.enabled = enabled

        if use_colors is None:
            self.use_colors = sys.stderr.isatty() and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        self.start_time: Optional[float] = None

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def __call__(self, message: str):
        """Output progress message to stderr if enabled."""
        if self.enabled:
            print(message, file=sys.stderr, flush=True)

    def error(self, message: str):
        """Always output errors to stderr."""
        print(self._colorize(f"ERROR: {message}", 'red'), file=sys.stderr, flush=True)

    def warning(self, message: str):
        """Always output warnings to stderr."""
        print(self._colorize(f"WARNING: {message}", 'yellow'), file=sys.stderr, flush=True)

    @contextmanager
    def task(self, description: str, total: Optional[int] = None):
        """
        Context manager for tracking a task with optional item count.

        Example:
            with progress.task("Running git fetch", total=12) as update:
                for i, result in enumerate(results, 1):
                    update(i, result.name)
        """
        self.start_time = time.time()

        if total:
            self(f"{description} ({total} items)...")
        else:
            self(f"{description}...")

        def update(current: int, item: str = "", failed: bool = False):
            """Report one finished item."""
            if total:
                marker = self._colorize("ERROR", 'red') if failed else self._colorize("ok", 'green')
                self(f"  [{current}/{total}] {item} {marker}")

        try:
            yield update
        finally:
            if self.enabled:
                elapsed = time.time() - self.start_time
                print(f"Completed in {elapsed:.1f}s", file=sys.stderr, flush=True)


# Global progress reporter instance
_progress = None


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Get the global progress reporter.

    Args:
        enabled: Override auto-detection of progress display

    Returns:
        ProgressReporter instance
    """
    global _progress
    if _progress is None or enabled is not None:
        _progress = ProgressReporter(enabled)
    return _progress


# Environment variable override
if os.environ.get('MULTIGIT_PROGRESS') == '0':
    _progress = ProgressReporter(enabled=False)
elif os.environ.get('MULTIGIT_PROGRESS') == '1':
    _progress = ProgressReporter(enabled=True)
