"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from .progress import get_progress
from .exit_codes import SUCCESS, GENERAL_ERROR, INTERRUPTED, CommandError


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr, forced on by --verbose
    - The wrapped function's return value becomes the exit code
    - Consistent error handling: fatal errors print a message and exit non-zero
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        progress = get_progress(enabled=verbose or None)
        kwargs['progress'] = progress

        try:
            code = func(*args, **kwargs)
        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            progress.error(str(e))
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            sys.exit(GENERAL_ERROR)

        sys.exit(SUCCESS if code is None else code)

    return wrapper
