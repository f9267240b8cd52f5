"""Initialize a new Grove repository."""

import click
from pathlib import Path

from grove.core.errors import GroveError
from grove.core.repository import Repository, DEFAULT_BRANCH
from grove.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
@click.option('-b', '--initial-branch', default=DEFAULT_BRANCH, help='Name of the first branch')
def init_cmd(path, initial_branch):
    """
    Initialize a new Grove repository.

    Creates a .grove directory with the object database, refs and HEAD.

    Examples:
        grove init                  # Initialize in current directory
        grove init my-project       # Initialize in my-project directory
        grove init -b trunk         # Start on a branch called trunk
    """
    repo_path = Path(path).resolve()

    try:
        repo = Repository(repo_path).init(initial_branch=initial_branch)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty Grove repository in {repo.grove_dir}"))
    click.echo(info(f"On branch {initial_branch}"))
