"""Config command - manage repository and global configuration."""

import click

from grove.core.config import Config, get_config
from grove.core.errors import GroveError
from grove.core.repository import Repository
from grove.cli.output import success, error, info


def split_key(key):
    """Split 'section.option'; a bare option lives in [core]."""
    return key.split('.', 1) if '.' in key else ('core', key)


def load_config(is_global):
    if is_global:
        return Config()
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a grove repository (use --global for global config)"))
        raise click.Abort()
    return get_config(repo)


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        grove config set user.name "Your Name"
        grove config set --global user.email "you@example.com"
    """
    config = load_config(is_global)
    section, option = split_key(key)
    try:
        config.set(section, option, value, global_config=is_global)
    except GroveError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
def config_get(key):
    """
    Get the effective value of a config key.

    Examples:
        grove config get user.name
    """
    repo = Repository.find_repository()
    config = get_config(repo)
    section, option = split_key(key)
    value = config.get(section, option)
    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)


@config_cmd.command('unset')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Unset global config')
def config_unset(key, is_global):
    """Remove a config value."""
    config = load_config(is_global)
    section, option = split_key(key)
    if not config.unset(section, option, global_config=is_global):
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(success(f"Unset {key}"))


@config_cmd.command('list')
def config_list():
    """List effective configuration values."""
    config = get_config(Repository.find_repository())
    values = config.list_all()
    if not values:
        click.echo(info("No configuration values set"))
    for section in sorted(values):
        for option, value in sorted(values[section].items()):
            click.echo(f"{section}.{option}={value}")
