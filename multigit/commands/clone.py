"""
Handles `git clone`, with fan-out when the address is a pattern.

A plain address is handed to git unchanged. An address with a wildcard,
such as `git@github.com:octocat/hello-*`, is resolved to every matching
repository of the owner on GitHub and each one is cloned concurrently.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..address import classify_address, has_wildcard
from ..domain.target import Target, CommandSpec
from ..exit_codes import SUCCESS, GENERAL_ERROR, SetupError, ProviderError
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..progress import ProgressReporter
from ..render import print_name_list, print_notice
from ..services.dispatch_service import DispatchService
from ..services.resolver_service import TargetResolver
from .run import RunOptions, fan_out

# git clone options whose value is the following argument
VALUE_OPTIONS = frozenset({
    '-o', '--origin',
    '-b', '--branch',
    '-u', '--upload-pack',
    '-c', '--config',
    '-j', '--jobs',
    '--template',
    '--reference',
    '--reference-if-able',
    '--separate-git-dir',
    '--depth',
    '--shallow-since',
    '--shallow-exclude',
    '--server-option',
    '--filter',
    '--bundle-uri',
})

NO_REPOS_MESSAGE = "No repositories found. Private repository cloning requires GITHUB_API_TOKEN"


@dataclass
class CloneArgs:
    """A `clone ...` argument list split into its parts."""
    address: Optional[str] = None
    directory: Optional[str] = None
    rest: List[str] = field(default_factory=list)  # starts with "clone"


def split_clone_args(args: List[str]) -> CloneArgs:
    """
    Separate the address and destination directory from the options.

    Args:
        args: Full argument list, args[0] == "clone"

    Returns:
        CloneArgs; `rest` keeps every other argument in order
    """
    parsed = CloneArgs(rest=[args[0]] if args else [])
    positional = []
    options_done = False
    i = 1
    while i < len(args):
        arg = args[i]
        if not options_done and arg == '--':
            options_done = True
            parsed.rest.append(arg)
        elif not options_done and arg.startswith('-') and arg != '-':
            parsed.rest.append(arg)
            if arg in VALUE_OPTIONS and i + 1 < len(args):
                i += 1
                parsed.rest.append(args[i])
        else:
            positional.append(arg)
        i += 1

    if positional:
        parsed.address = positional[0]
    if len(positional) > 1:
        parsed.directory = positional[1]
    # Anything past the directory is left for git to reject
    parsed.rest.extend(positional[2:])
    return parsed


def build_resolver(config: Dict[str, Any]) -> TargetResolver:
    """Resolver wired from the github section of the configuration."""
    github = config.get("github", {})
    rate_limit = github.get("rate_limit", {})
    client = GitHubClient(
        token=github.get("token") or None,
        api_url=github.get("api_url") or "https://api.github.com",
        max_retries=int(rate_limit.get("max_retries", 3)),
        max_delay=float(rate_limit.get("max_delay_seconds", 60)),
    )
    return TargetResolver(
        client,
        page_size=int(github.get("page_size", 100)),
        dedupe_names=bool(github.get("dedupe", True)),
    )


def passthrough(args: List[str], options: RunOptions, progress: ProgressReporter,
                git_client: Optional[GitClient] = None) -> int:
    """Run git once with the terminal attached."""
    git = git_client or GitClient()
    try:
        code = git.run_passthrough([options.git_executable, *args], cwd=options.workdir)
    except OSError as e:
        progress.error(str(e))
        return GENERAL_ERROR
    return SUCCESS if code == 0 else GENERAL_ERROR


def run_clone(args: List[str], options: RunOptions, config: Dict[str, Any],
              progress: ProgressReporter,
              resolver: Optional[TargetResolver] = None,
              dispatcher: Optional[DispatchService] = None,
              git_client: Optional[GitClient] = None) -> int:
    """
    Clone one repository, or every repository matching a pattern.

    Raises:
        SetupError: Unsupported host, bad address, or a destination
            directory given together with a pattern
        PatternError: Malformed glob
        ProviderError: The owner's repositories could not be listed
    """
    parsed = split_clone_args(args)
    if parsed.address is None or not has_wildcard(parsed.address):
        return passthrough(args, options, progress, git_client)

    address = classify_address(parsed.address)
    hosts = [h.lower() for h in config.get("github", {}).get("hosts", ["github.com"])]
    if address.host not in hosts:
        raise SetupError(
            f"Cannot multi-clone from {address.host}: only {', '.join(hosts)} is supported"
        )
    if parsed.directory:
        raise SetupError(f"Invalid directory for multi-clone: {parsed.directory}")

    resolver = resolver or build_resolver(config)
    progress(f"Listing repositories of {address.owner} matching {address.pattern}...")
    try:
        repos = resolver.resolve(address.owner, address.pattern)
    except ProviderError as e:
        if e.partial:
            progress.warning(f"Listing stopped after {len(e.partial)} repositories")
        raise

    if not repos.names:
        print_notice(NO_REPOS_MESSAGE)
        return SUCCESS

    print_name_list("Cloning:", repos.names)
    targets = [Target.remote(name, address.prefix) for name in repos.names]
    spec = CommandSpec(
        args=tuple(parsed.rest),
        executable=options.git_executable,
        cwd=options.workdir,
    )
    return fan_out(targets, spec, options, progress, f"Cloning {len(targets)} repositories", dispatcher)
