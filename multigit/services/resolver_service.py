"""
Target resolution service for multigit.

Turns an account name and a glob pattern into the list of repository
names to fan out over, by paging through the account's own listing and
its organization listing.
"""

import re
import logging
from typing import Callable, List, Optional, Pattern

from ..domain.result import ResolvedRepoSet
from ..exit_codes import PatternError, ProviderError
from ..infra.github_client import GitHubClient, RepoPage

logger = logging.getLogger(__name__)

MATCH_ALL = ('', '*')


def _class_member(pattern: str, i: int):
    """Read one, possibly escaped, character class member starting at i."""
    if i >= len(pattern):
        raise PatternError(pattern, "unterminated character class")
    char = pattern[i]
    if char in '-]':
        raise PatternError(pattern, f"unexpected {char!r} in character class")
    if char == '\\':
        i += 1
        if i >= len(pattern):
            raise PatternError(pattern, "unterminated character class")
        char = pattern[i]
    return char, i + 1


def _translate_class(pattern: str, i: int):
    """Translate the class whose body starts at i; returns (regex, next index)."""
    negate = i < len(pattern) and pattern[i] in '!^'
    if negate:
        i += 1

    ranges = []
    while not (ranges and i < len(pattern) and pattern[i] == ']'):
        lo, i = _class_member(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == '-':
            hi, i = _class_member(pattern, i + 1)
        ranges.append((lo, hi))

    # A reversed range is well formed but matches nothing
    body = ''.join(
        re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}"
        for lo, hi in ranges if lo <= hi
    )
    if not body:
        return ('.' if negate else '(?!)'), i + 1
    return f"[{'^' if negate else ''}{body}]", i + 1


def compile_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a shell glob into a regular expression for whole-name matching.

    `*` matches any run of characters, `?` any single character, and
    `[...]` a character class with `a-z` ranges, negated by a leading `!`
    or `^`. A backslash makes the next character literal, inside or
    outside a class. Inside a class, a literal `]` or `-` must be escaped.

    Raises:
        PatternError: Unterminated or empty class, unescaped `]` or `-`
            where a class member is expected, or a trailing backslash
    """
    parts = []
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == '*':
            parts.append('.*')
            i += 1
        elif char == '?':
            parts.append('.')
            i += 1
        elif char == '[':
            regex, i = _translate_class(pattern, i + 1)
            parts.append(regex)
        elif char == '\\':
            if i + 1 >= n:
                raise PatternError(pattern, "trailing backslash")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(char))
            i += 1
    return re.compile(''.join(parts), re.DOTALL)


def validate_pattern(pattern: str) -> None:
    """
    Reject malformed glob patterns.

    Raises:
        PatternError: See compile_pattern
    """
    compile_pattern(pattern)


def filter_names(names: List[str], pattern: str) -> List[str]:
    """
    Keep the names matching a shell glob.

    An empty pattern or a lone '*' keeps everything. Matching is
    case-sensitive and applies to the bare repository name.
    """
    if pattern in MATCH_ALL:
        return list(names)
    regex = compile_pattern(pattern)
    return [name for name in names if regex.fullmatch(name)]


def dedupe(names: List[str]) -> List[str]:
    """Drop repeated names, keeping the first occurrence."""
    seen = set()
    unique = []
    for name in names:
        if name not in seen:
            seen.add(name)
            unique.append(name)
    return unique


class TargetResolver:
    """
    Resolves a repository pattern against a hosting provider.

    Example:
        resolver = TargetResolver(GitHubClient())
        repos = resolver.resolve("octocat", "hello-*")
        for name in repos:
            print(name)
    """

    def __init__(self, client: Optional[GitHubClient] = None, page_size: int = 100,
                 dedupe_names: bool = True):
        self.client = client or GitHubClient()
        self.page_size = page_size
        self.dedupe_names = dedupe_names

    def _collect(self, fetch: Callable[..., RepoPage], account: str, into: List[str]) -> None:
        """Follow next-page links, appending names as each page arrives."""
        page = 1
        while True:
            result = fetch(account, page=page, per_page=self.page_size)
            into.extend(result.names)
            if not result.next_page:
                return
            page = result.next_page

    def list_owned(self, account: str) -> List[str]:
        """
        All repositories the account owns directly.

        Raises:
            ProviderError: On any failure, with the names fetched so far in `partial`
        """
        names: List[str] = []
        try:
            self._collect(self.client.list_user_repos, account, names)
        except ProviderError as e:
            e.partial = list(names)
            raise
        logger.debug(f"{account}: {len(names)} owned repositories")
        return names

    def list_org(self, account: str) -> List[str]:
        """
        All repositories of the account seen as an organization.

        Most accounts are not organizations, so errors end the listing
        quietly and keep what was already collected.
        """
        names: List[str] = []
        try:
            self._collect(self.client.list_org_repos, account, names)
        except ProviderError as e:
            logger.debug(f"{account}: organization listing stopped: {e}")
        else:
            logger.debug(f"{account}: {len(names)} organization repositories")
        return names

    def resolve(self, account: str, pattern: str) -> ResolvedRepoSet:
        """
        Resolve a pattern to concrete repository names.

        Args:
            account: User or organization login
            pattern: Shell glob, '' or '*' for everything

        Returns:
            ResolvedRepoSet, possibly empty

        Raises:
            PatternError: Malformed pattern (checked before any API call)
            ProviderError: The account's own listing failed
        """
        if pattern not in MATCH_ALL:
            validate_pattern(pattern)

        names = self.list_owned(account) + self.list_org(account)
        if self.dedupe_names:
            names = dedupe(names)

        matched = filter_names(names, pattern)
        logger.debug(f"{account}/{pattern or '*'}: {len(matched)} of {len(names)} repositories match")
        return ResolvedRepoSet(account=account, names=matched)
