"""Object inspection commands - cat-file and count-objects."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.objects import Blob, Commit, FileMode, Tree
from grove.core.repository import Repository
from grove.cli.output import error


def resolve_object(repo, name):
    """Resolve a reference, full hash or unique hash prefix to a full hash."""
    obj_hash = repo.refs.resolve_reference(name)
    if obj_hash is not None:
        return obj_hash

    if len(name) >= 4:
        matches = [h for h in repo.objects.list_objects() if h.startswith(name.lower())]
        if len(matches) == 1:
            return matches[0]
    return None


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('object_name')
def cat_file_cmd(show_type, show_size, pretty, object_name):
    """
    Show object content, type, or size.

    OBJECT_NAME may be a full hash, a unique prefix of at least four
    characters, a branch, a tag or HEAD.

    Examples:
        grove cat-file -t abc1234     # Show object type
        grove cat-file -s abc1234     # Show payload size
        grove cat-file -p HEAD        # Pretty-print the HEAD commit
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    try:
        obj_hash = resolve_object(repo, object_name)
        if obj_hash is None:
            click.echo(error(f"Object not found: {object_name}"))
            raise click.Abort()
        obj = repo.objects.load_object(obj_hash)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if show_type:
        click.echo(obj.type)
    elif show_size:
        click.echo(len(obj.serialize()))
    elif isinstance(obj, Commit):
        click.echo(f"{Fore.YELLOW}tree {obj.tree}{Style.RESET_ALL}")
        for parent in obj.parents:
            click.echo(f"{Fore.YELLOW}parent {parent}{Style.RESET_ALL}")
        click.echo(f"author {obj.author}")
        click.echo(f"committer {obj.committer}")
        click.echo()
        click.echo(obj.message, nl=False)
    elif isinstance(obj, Tree):
        for entry in obj.entries:
            kind = 'tree' if entry.mode is FileMode.DIRECTORY else 'blob'
            click.echo(f"{entry.mode.octal:>6} {kind} {Fore.YELLOW}{entry.hash}{Style.RESET_ALL}\t{entry.name}")
    elif isinstance(obj, Blob):
        if pretty or b'\0' not in obj.data:
            click.echo(obj.data.decode('utf-8', errors='replace'), nl=False)
        else:
            click.echo(f"<binary data: {obj.size} bytes>")


@click.command('count-objects')
@click.option('-v', '--verbose', is_flag=True, help='Also report disk usage')
def count_objects_cmd(verbose):
    """
    Count loose objects and their disk usage.

    Examples:
        grove count-objects
        grove count-objects -v
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    count, size = repo.objects.count_objects()
    if verbose:
        click.echo(f"count: {count}")
        click.echo(f"size: {size // 1024} KiB ({size} bytes)")
    else:
        click.echo(f"{count} objects, {size // 1024} kilobytes")
