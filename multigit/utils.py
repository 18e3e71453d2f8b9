"""
Shared utility functions for multigit.
"""
import os
from typing import List

from .config import logger
from .domain.target import Target
from .exit_codes import SetupError


def is_git_repo(path):
    """Check if a given path is a Git checkout (.git may be a dir or a gitfile)."""
    return os.path.exists(os.path.join(path, '.git'))


def resolve_workdir(workdir=None):
    """
    Absolute working directory, validated.

    Raises:
        SetupError: If the directory does not exist
    """
    path = os.path.abspath(os.path.expanduser(workdir or os.getcwd()))
    if not os.path.isdir(path):
        raise SetupError(f"Not a directory: {workdir}")
    return path


def find_checkouts(base_dir) -> List[str]:
    """
    Find git checkouts among the immediate children of a directory.

    Args:
        base_dir: Directory to scan (not recursive)

    Returns:
        Sorted list of child directory names
    """
    names = []
    try:
        entries = os.listdir(base_dir)
    except OSError as e:
        raise SetupError(f"Cannot read directory {base_dir}: {e}")

    for item in entries:
        item_path = os.path.join(base_dir, item)
        if os.path.isdir(item_path) and is_git_repo(item_path):
            names.append(item)

    logger.debug(f"Found {len(names)} checkouts in {base_dir}")
    return sorted(names)


def local_targets(base_dir) -> List[Target]:
    """Targets for every checkout directly under base_dir."""
    return [Target.local(name, os.path.join(base_dir, name)) for name in find_checkouts(base_dir)]
