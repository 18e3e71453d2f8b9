"""
Infrastructure layer for multigit.

Contains abstractions for external systems:
- GitClient: git process execution
- GitHubClient: GitHub repository listing API

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .github_client import GitHubClient, RateLimitStatus, RepoPage

__all__ = [
    'GitClient',
    'GitHubClient',
    'RateLimitStatus',
    'RepoPage',
]
