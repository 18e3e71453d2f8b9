"""
Clone address classification for multigit.

A clone address names a host, an owner and a repository (or repository
pattern). Three input shapes are recognised, tried in this order:

    url    scheme://[user@]host[:port]/owner/repo
    scp    [user@]host:owner/repo            (no scheme, colon before any slash)
    bare   host/owner/repo                   (no scheme, no colon; cloned over https)

The prefix keeps the user's own form so each discovered repository is
cloned the same way the pattern was written.
"""

import re
from dataclasses import dataclass

from .exit_codes import AddressError

WILDCARD_CHARS = '*?['

_URL_RE = re.compile(r'^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://(?P<authority>[^/]+)/(?P<path>.*)$')
_SCP_RE = re.compile(r'^(?:(?P<user>[^@/:]+)@)?(?P<host>[^@/:]+):(?P<path>.*)$')
_BARE_RE = re.compile(r'^(?P<host>[^/:]+)/(?P<path>.*)$')


@dataclass(frozen=True)
class RemoteAddress:
    """A classified clone address."""
    shape: str
    host: str
    owner: str
    pattern: str
    prefix: str


def has_wildcard(value: str) -> bool:
    """True when the value contains a glob metacharacter."""
    return any(char in value for char in WILDCARD_CHARS)


def _split_path(raw: str, path: str):
    parts = [part for part in path.strip('/').split('/') if part]
    if len(parts) != 2:
        raise AddressError(f"Cannot find owner and repository in {raw!r}")
    owner, pattern = parts
    if pattern.endswith('.git'):
        pattern = pattern[:-len('.git')]
    if not pattern:
        raise AddressError(f"Missing repository name in {raw!r}")
    return owner, pattern


def classify_address(raw: str) -> RemoteAddress:
    """
    Classify a clone address.

    Args:
        raw: Address as typed by the user

    Returns:
        RemoteAddress

    Raises:
        AddressError: If the address matches none of the known shapes
    """
    raw = raw.strip()

    match = _URL_RE.match(raw)
    if match:
        authority = match.group('authority')
        host = authority.rsplit('@', 1)[-1].split(':', 1)[0]
        if not host:
            raise AddressError(f"Missing host in {raw!r}")
        owner, pattern = _split_path(raw, match.group('path'))
        prefix = f"{match.group('scheme')}://{authority}/{owner}/"
        return RemoteAddress('url', host.lower(), owner, pattern, prefix)

    if '://' not in raw:
        match = _SCP_RE.match(raw)
        if match:
            user = match.group('user')
            host = match.group('host')
            owner, pattern = _split_path(raw, match.group('path'))
            login = f"{user}@" if user else ""
            prefix = f"{login}{host}:{owner}/"
            return RemoteAddress('scp', host.lower(), owner, pattern, prefix)

        match = _BARE_RE.match(raw)
        if match:
            host = match.group('host')
            owner, pattern = _split_path(raw, match.group('path'))
            prefix = f"https://{host}/{owner}/"
            return RemoteAddress('bare', host.lower(), owner, pattern, prefix)

    raise AddressError(f"Unrecognised clone address {raw!r}")
