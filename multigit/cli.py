#!/usr/bin/env python3

import click

from multigit import __version__
from multigit.config import load_config, configure_logging
from multigit.cli_utils import standard_command
from multigit.commands.run import RunOptions, run_local
from multigit.commands.clone import run_clone
from multigit.utils import resolve_workdir


@click.command(context_settings={
    'ignore_unknown_options': True,
    'allow_interspersed_args': False,
    'help_option_names': ['-h', '--help'],
})
@click.option('-v', '--verbose', is_flag=True, help='Be verbose: debug logging and progress on stderr')
@click.option('-d', '--dir', 'workdir', default=None,
              help='Directory that contains your git repositories (default: current directory)')
@click.option('-j', '--jobs', type=click.IntRange(min=1), default=None,
              help='Maximum concurrent git processes (default: 12)')
@click.option('--timeout', type=click.FloatRange(min=0), default=None,
              help='Kill a git process after this many seconds (default: no limit)')
@click.version_option(__version__, prog_name='multigit')
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@standard_command
def cli(ctx, verbose, workdir, jobs, timeout, command, progress, **kwargs):
    """multigit - run git commands against many git repositories at once.

    COMMAND is passed to git verbatim, once per checkout found directly
    under the working directory.

    `clone` is special: a plain address is cloned as usual, while an
    address with a wildcard clones every matching GitHub repository.

    \b
    Examples:
        multigit status -s
        multigit -d ~/src fetch --all --prune
        multigit clone git@github.com:octocat/hello-*
        multigit -j 4 clone --depth 1 https://github.com/octocat/*

    Exits 1 only when every repository failed, or on a setup error.
    """
    if not command:
        click.echo(ctx.get_help())
        return 0

    config = load_config()
    configure_logging(config, verbose)

    options = RunOptions.from_config(config, resolve_workdir(workdir), jobs=jobs, timeout=timeout)
    args = list(command)

    if args[0] == 'clone':
        return run_clone(args, options, config, progress)
    return run_local(args, options, progress)


def main():
    cli()

if __name__ == "__main__":
    main()
