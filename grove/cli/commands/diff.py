"""Diff command - show changes between the working tree, index and HEAD."""

import click

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.operations.diff import format_diff, format_stat
from grove.cli.output import error


@click.command('diff')
@click.option('--cached', '--staged', 'cached', is_flag=True, help='Show staged changes (index vs HEAD)')
@click.option('--stat', is_flag=True, help='Show per-file change counts only')
@click.option('--no-color', is_flag=True, help='Disable colored output')
def diff_cmd(cached, stat, no_color):
    """
    Show changes.

    Without options, shows changes in the working tree that are not
    yet staged. With --cached, shows what the next commit would record.

    Examples:
        grove diff
        grove diff --cached
        grove diff --stat
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    try:
        result = repo.diff.diff(cached=cached)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.is_empty():
        return

    color = not no_color
    if stat:
        click.echo(format_stat(result, color=color))
    else:
        click.echo(format_diff(result, color=color))
        click.echo()
        click.echo(result.summary())
