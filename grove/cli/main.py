"""Main CLI entry point for Grove."""

import logging

import click
from colorama import init

from grove import __version__
from grove.cli.output import BANNER
from grove.cli.commands import (init_cmd, add_cmd, commit_cmd, config_cmd, status_cmd,
                                diff_cmd, log_cmd, branch_cmd, tag_cmd, show_ref_cmd,
                                cat_file_cmd, count_objects_cmd, clone_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class GroveGroup(click.Group):
    """Group that shows the banner above the help text."""

    def format_help(self, ctx, formatter):
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=GroveGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log internal operations to stderr')
def cli(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')


cli.add_command(init_cmd)
cli.add_command(clone_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(config_cmd)
cli.add_command(status_cmd)
cli.add_command(diff_cmd)
cli.add_command(log_cmd)
cli.add_command(branch_cmd)
cli.add_command(tag_cmd)
cli.add_command(show_ref_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(count_objects_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
