"""Clone command - create a repository from a remote's references."""

import click

from grove.core.errors import GroveError
from grove.remote.client import RemoteClient
from grove.remote.clone import clone, directory_for
from grove.cli.output import success, error, info, warning


@click.command('clone')
@click.argument('url')
@click.argument('directory', required=False)
@click.option('-b', '--branch', help='Branch to point HEAD at')
@click.option('--timeout', type=int, default=30, help='Request timeout in seconds')
def clone_cmd(url, directory, branch, timeout):
    """
    Clone a repository into a new directory.

    Discovers the remote's branches over HTTP and records them as
    remote-tracking refs. Object transfer is not implemented, so the
    checked-out branch stays unborn until objects are imported.

    Examples:
        grove clone https://example.com/project.git
        grove clone https://example.com/project.git work -b develop
    """
    directory = directory or directory_for(url)
    click.echo(info(f"Cloning into '{directory}'..."))

    try:
        remote = RemoteClient(timeout=timeout).discover_refs(url)
        result = clone(remote, directory, branch=branch)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"Discovered {len(remote.refs)} reference(s) at {url}"))
    for name in remote.branches:
        click.echo(info(f"  refs/remotes/{remote.name}/{name}"))
    if result.checked_out_branch:
        click.echo(success(f"Checked out branch {result.checked_out_branch}"))
    else:
        click.echo(warning("No objects were received; the default branch has no commits yet"))
