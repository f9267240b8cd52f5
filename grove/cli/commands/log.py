"""Log command - show commit history."""

import click
from collections import defaultdict
from datetime import datetime
from colorama import Fore, Style

from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.operations.log import log
from grove.cli.output import error, info


def format_timestamp(timestamp: int) -> str:
    """Format Unix timestamp to readable date."""
    return datetime.fromtimestamp(timestamp).strftime("%a %b %d %H:%M:%S %Y")


def get_ref_labels(repo):
    """Map commit hash -> list of branch and tag names pointing at it."""
    labels = defaultdict(list)
    current = repo.refs.get_current_branch()
    for ref in repo.refs.list_branches():
        name = f"HEAD -> {ref.name}" if ref.name == current else ref.name
        labels[ref.hash].append(f"{Fore.GREEN}{name}{Style.RESET_ALL}")
    for ref in repo.refs.list_tags():
        labels[ref.hash].append(f"{Fore.YELLOW}tag: {ref.name}{Style.RESET_ALL}")
    return labels


@click.command('log')
@click.option('-n', '--max-count', type=int, help='Limit the number of commits shown')
@click.option('--oneline', is_flag=True, help='Show each commit on a single line')
@click.argument('revision', required=False)
def log_cmd(max_count, oneline, revision):
    """
    Show commit history.

    Follows first parents from HEAD (or REVISION), newest first.

    Examples:
        grove log
        grove log -n 5
        grove log --oneline main
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository"))
        raise click.Abort()

    try:
        result = log(repo, max_count=max_count, start=revision)
        labels = get_ref_labels(repo)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not result.entries:
        click.echo(info("No commits yet"))
        return

    for entry in result.entries:
        commit = entry.commit
        decoration = ""
        if labels.get(entry.hash):
            decoration = " (" + ", ".join(labels[entry.hash]) + ")"

        if oneline:
            summary = commit.message.split('\n')[0]
            click.echo(f"{Fore.YELLOW}{entry.hash[:7]}{Style.RESET_ALL}{decoration} {summary}")
            continue

        click.echo(f"{Fore.YELLOW}commit {entry.hash}{Style.RESET_ALL}{decoration}")
        click.echo(f"Author: {commit.author.name} <{commit.author.email}>")
        click.echo(f"Date:   {format_timestamp(commit.author.timestamp)}")
        click.echo()
        for line in commit.message.rstrip('\n').split('\n'):
            click.echo(f"    {line}")
        click.echo()

    if result.has_more:
        click.echo(info(f"... more commits beyond the first {len(result.entries)}"))
