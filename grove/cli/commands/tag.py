"""Tag command - list and create lightweight tags."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.refs import GitRef, RefType
from grove.core.repository import Repository
from grove.cli.output import success, error, info


@click.command('tag')
@click.argument('name', required=False)
@click.argument('target', required=False, default='HEAD')
@click.option('-d', '--delete', is_flag=True, help='Delete the tag')
@click.option('-f', '--force', is_flag=True, help='Replace an existing tag')
def tag_cmd(name, target, delete, force):
    """
    List, create, or delete tags.

    Examples:
        grove tag                # List tags
        grove tag v1.0           # Tag HEAD
        grove tag v0.9 abc1234...  # Tag a specific object
        grove tag -d v1.0        # Delete tag
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    refs = repo.refs
    try:
        if name is None:
            tags = refs.list_tags()
            if not tags:
                click.echo(info("No tags"))
            for ref in tags:
                click.echo(f"{Fore.YELLOW}{ref.name}{Style.RESET_ALL}")
            return

        if delete:
            if not refs.delete_ref(GitRef(name, '', RefType.TAG)):
                click.echo(error(f"Tag '{name}' not found"))
                raise click.Abort()
            click.echo(success(f"Deleted tag {name}"))
            return

        obj_hash = refs.resolve_reference(target)
        if obj_hash is None:
            click.echo(error(f"Not a valid reference: {target}"))
            raise click.Abort()
        refs.create_tag(name, obj_hash, force=force)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"Created tag {name} at {obj_hash[:7]}"))
