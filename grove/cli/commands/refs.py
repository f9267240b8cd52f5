"""Show-ref command - display references."""

import click
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.refs import DirectRef
from grove.core.repository import Repository
from grove.cli.output import error, warning


@click.command('show-ref')
@click.option('--heads', is_flag=True, help='Show only branch references')
@click.option('--tags', is_flag=True, help='Show only tag references')
@click.option('--head', is_flag=True, help='Show HEAD reference')
def show_ref_cmd(heads, tags, head):
    """
    Display references in the repository.

    Shows HEAD, branches, remote-tracking branches and tags.

    Examples:
        grove show-ref              # Show all references
        grove show-ref --heads      # Show only branches
        grove show-ref --tags       # Show only tags
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    show_all = not (heads or tags or head)
    refs = repo.refs
    lines = []

    try:
        if head or show_all:
            head_ref = refs.load_head()
            target = refs.resolve_head()
            if isinstance(head_ref, DirectRef):
                lines.append(f"{target} {Fore.YELLOW}HEAD (detached){Style.RESET_ALL}")
            elif target is not None:
                lines.append(f"{target} {Fore.CYAN}HEAD{Style.RESET_ALL} -> {head_ref.ref_path}")

        if heads or show_all:
            for ref in refs.list_branches():
                lines.append(f"{ref.hash} {Fore.GREEN}{ref.full_name}{Style.RESET_ALL}")

        if show_all:
            for ref in refs.list_remote_branches():
                lines.append(f"{ref.hash} {Fore.RED}{ref.full_name}{Style.RESET_ALL}")

        if tags or show_all:
            for ref in refs.list_tags():
                lines.append(f"{ref.hash} {Fore.YELLOW}{ref.full_name}{Style.RESET_ALL}")
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not lines:
        click.echo(warning("No references found"))
    for line in lines:
        click.echo(line)
