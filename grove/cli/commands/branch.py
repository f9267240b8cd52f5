"""Branch command - list, create and delete branches."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.objects import Commit
from grove.core.refs import GitRef, RefType
from grove.core.repository import Repository
from grove.cli.output import success, error, info


def get_commit_summary(repo, commit_hash):
    """First line of a commit message, shortened for listings."""
    commit = repo.objects.load_object(commit_hash)
    if not isinstance(commit, Commit):
        return f"({commit.type})"
    message = commit.message.split('\n')[0]
    if len(message) > 50:
        message = message[:47] + "..."
    return message


@click.command('branch')
@click.argument('name', required=False)
@click.argument('start_point', required=False, default='HEAD')
@click.option('-d', '--delete', is_flag=True, help='Delete the branch')
@click.option('-f', '--force', is_flag=True, help='Reset the branch if it already exists')
@click.option('-v', '--verbose', is_flag=True, help='Show the tip commit of each branch')
def branch_cmd(name, start_point, delete, force, verbose):
    """
    List, create, or delete branches.

    Examples:
        grove branch                   # List branches
        grove branch feature/login     # Create branch at HEAD
        grove branch hotfix v1.0       # Create branch at tag v1.0
        grove branch -d feature/login  # Delete branch
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    refs = repo.refs
    try:
        if name is None:
            current = refs.get_current_branch()
            branches = refs.list_branches()
            if not branches:
                click.echo(info("No branches yet"))
            for ref in branches:
                marker = f"* {Fore.GREEN}" if ref.name == current else "  "
                line = f"{marker}{ref.name}{Style.RESET_ALL}"
                if verbose:
                    line += f" {Fore.YELLOW}{ref.hash[:7]}{Style.RESET_ALL} {get_commit_summary(repo, ref.hash)}"
                click.echo(line)
            return

        if delete:
            if name == refs.get_current_branch():
                click.echo(error(f"Cannot delete the checked out branch '{name}'"))
                raise click.Abort()
            if not refs.delete_ref(GitRef(name, '', RefType.BRANCH)):
                click.echo(error(f"Branch '{name}' not found"))
                raise click.Abort()
            click.echo(success(f"Deleted branch {name}"))
            return

        target = refs.resolve_reference(start_point)
        if target is None:
            click.echo(error(f"Not a valid reference: {start_point}"))
            raise click.Abort()
        refs.create_branch(name, target, force=force)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"Created branch {name} at {target[:7]}"))
