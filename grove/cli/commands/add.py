"""Add command - stage files for commit."""

import click

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.operations.add import stage_paths
from grove.cli.output import success, error, info


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
@click.option('--ignore-missing', is_flag=True, help='Skip paths that do not exist')
@click.option('-n', '--dry-run', is_flag=True, help="Only show what would be staged")
def add_cmd(paths, ignore_missing, dry_run):
    """
    Add file contents to the staging area.

    Modified files must be added again to stage the new changes.
    Directories are added recursively.

    Examples:
        grove add file.txt
        grove add src/
        grove add .
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    try:
        result = stage_paths(repo, paths, ignore_missing=ignore_missing, dry_run=dry_run)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if result.staged:
        verb = "Would add" if dry_run else "Added"
        click.echo(success(f"{verb} {len(result.staged)} file(s) to staging area"))
        for path in result.staged_paths:
            click.echo(info(f"  {path}"))

    if result.failed:
        click.echo(error(f"Failed to add {len(result.failed)} file(s):"))
        for path, reason in result.failed:
            click.echo(error(f"  {path}: {reason}"))

    if not result.staged and not result.failed:
        click.echo(error("No files matched"))
