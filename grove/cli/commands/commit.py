"""Commit command - record staged changes."""

import click

from grove.core.errors import Conflict, GroveError
from grove.core.objects import Signature
from grove.core.repository import Repository
from grove.operations.commit import create_commit
from grove.cli.output import success, error, info


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--author', help='Override author as "Name <email>"')
@click.option('--allow-empty', is_flag=True, help='Record a commit even if the tree is unchanged')
def commit_cmd(message, author, allow_empty):
    """
    Record changes to the repository.

    Creates a commit from everything currently staged and advances the
    current branch.

    Examples:
        grove commit -m "Initial commit"
        grove commit -m "Fix" --author "Ada <ada@example.com>"
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    signature = None
    if author:
        name, _, email = author.partition('<')
        if not email.endswith('>') or not name.strip():
            click.echo(error(f"Invalid author {author!r}, expected 'Name <email>'"))
            raise click.Abort()
        signature = Signature(name.strip(), email[:-1].strip())

    try:
        result = create_commit(repo, message, author=signature, allow_empty=allow_empty)
    except Conflict as e:
        click.echo(info(str(e)))
        click.echo(info("Use 'grove add <file>' to stage changes"))
        raise click.Abort()
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    where = result.branch or 'detached HEAD'
    root = " (root-commit)" if result.is_root_commit else ""
    summary = message.split('\n')[0]
    click.echo(success(f"[{where}{root} {result.commit_hash[:7]}] {summary}"))
    click.echo(info(f"{result.files_committed} file(s) in tree {result.tree_hash[:7]}"))
