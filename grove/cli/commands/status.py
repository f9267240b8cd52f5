"""Status command - show working tree status."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.operations.status import compute_status
from grove.cli.output import success, error, info


def _section(title: str, colour: str, hint: str, rows):
    click.echo(colour + title + Style.RESET_ALL)
    click.echo(info(hint))
    click.echo()
    for label, path in rows:
        click.echo(f"  {colour}{label}{path}{Style.RESET_ALL}")
    click.echo()


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Displays:
    - Changes staged for commit (index vs HEAD)
    - Changes not staged for commit (working tree vs index)
    - Untracked files

    Examples:
        grove status
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    try:
        status = compute_status(repo)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if status.branch is None:
        click.echo(f"{Fore.YELLOW}HEAD detached at {status.head_commit[:7]}{Style.RESET_ALL}")
    else:
        click.echo(f"On branch {Fore.CYAN}{status.branch}{Style.RESET_ALL}")
        if status.head_commit is None:
            click.echo("No commits yet")
    click.echo()

    if status.has_staged_changes:
        rows = ([('new file:   ', p) for p in status.staged_new]
                + [('modified:   ', p) for p in status.staged_modified]
                + [('deleted:    ', p) for p in status.staged_deleted])
        _section("Changes to be committed:", Fore.GREEN,
                 "  (use \"grove diff --cached\" to see them)", rows)

    if status.has_unstaged_changes:
        rows = ([('modified:   ', p) for p in status.modified]
                + [('deleted:    ', p) for p in status.deleted])
        _section("Changes not staged for commit:", Fore.YELLOW,
                 "  (use \"grove add <file>...\" to update what will be committed)", rows)

    if status.untracked:
        _section("Untracked files:", Fore.RED,
                 "  (use \"grove add <file>...\" to include in what will be committed)",
                 [('', p) for p in status.untracked])

    if status.is_clean():
        click.echo(success("Nothing to commit, working tree clean"))
    elif not status.has_staged_changes:
        click.echo(info("No changes added to commit (use \"grove add\")"))
